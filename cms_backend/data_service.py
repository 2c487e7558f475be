# cms_backend/data_service.py
from cms_backend.models import Course, Professor, User


class MockCollection:
    """In-memory record list with server-assigned, incrementing ids"""

    def __init__(self, model, records=None):
        self.model = model
        self.records = list(records or [])
        self.next_id = max((r.id for r in self.records), default=0) + 1

    def get_all(self):
        return self.records

    def get_by_id(self, record_id: int):
        return next((r for r in self.records if r.id == record_id), None)

    def add(self, record_data):
        new_record = self.model(id=self.next_id, **record_data.model_dump())
        self.records.append(new_record)
        self.next_id += 1
        return new_record

    def update(self, record_id: int, record_data):
        record = self.get_by_id(record_id)
        if record:
            update_data = record_data.model_dump(exclude_unset=True)
            for key, value in update_data.items():
                setattr(record, key, value)
            return record
        return None

    def delete(self, record_id: int):
        record = self.get_by_id(record_id)
        if record:
            self.records.remove(record)
            return True
        return False


class CatalogMockDataService:
    def __init__(self):
        self.professors = MockCollection(Professor, [
            Professor(id=1, name="Dr. Alice Smith", bio="Distributed systems researcher",
                      skills=["Go", "Kubernetes"], publications={"Consensus at Scale": 2019}),
            Professor(id=2, name="Dr. Bob Johnson", bio="Works on compilers and type systems",
                      skills=["Rust", "OCaml"], publications={}),
            Professor(id=3, name="Dr. Carol Williams", bio="Databases and storage engines",
                      skills=["SQL"], publications={"Log-Structured Merge Trees Revisited": 2021}),
        ])
        self.courses = MockCollection(Course, [
            Course(id=1, title="Introduction to Computer Science", description="Basic concepts of computer science",
                   category="Foundations", author_id=2),
            Course(id=2, title="Cloud Native Systems", description="Containers, orchestration and service meshes",
                   category="DevOps", author_id=1),
            Course(id=3, title="Database Systems", description="Relational database design and SQL",
                   category=None, author_id=3),
        ])
        self.users = MockCollection(User, [
            User(id=1, name="Dana Lee", email="dana@example.edu", role="student", course_ids=[1, 2]),
            User(id=2, name="Evan Cole", email="evan@example.edu", role="student", course_ids=[2]),
            User(id=3, name="Fay Moss", email="fay@example.edu", role="admin", course_ids=[]),
        ])
