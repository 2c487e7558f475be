# cms_backend/service.py
from typing import Optional

from cms_backend.data_service import CatalogMockDataService, MockCollection


class EntityService:
    def __init__(self, collection: MockCollection):
        self.collection = collection

    def get_all(self):
        return self.collection.get_all()

    def get_by_id(self, record_id: int):
        return self.collection.get_by_id(record_id)

    def create(self, record_data):
        return self.collection.add(record_data)

    def update(self, record_id: int, record_data):
        return self.collection.update(record_id, record_data)

    def delete(self, record_id: int):
        return self.collection.delete(record_id)


class CourseService(EntityService):
    def search(self, keyword: Optional[str]):
        needle = (keyword or "").strip().lower()
        if not needle:
            return self.get_all()
        return [
            c for c in self.get_all()
            if needle in " ".join(filter(None, [c.title, c.description, c.category])).lower()
        ]

    def filter_by_professor(self, professor_id: Optional[int]):
        if professor_id is None:
            return self.get_all()
        return [c for c in self.get_all() if c.author_id == professor_id]


class CatalogService:
    def __init__(self):
        self.data_service = CatalogMockDataService()
        self.courses = CourseService(self.data_service.courses)
        self.professors = EntityService(self.data_service.professors)
        self.users = EntityService(self.data_service.users)
