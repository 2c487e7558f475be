# cms_console/forms.py
from typing import Any, Dict, List, Optional, Tuple
import copy

from cms_console.errors import ValidationError
from cms_console.models import Course, Entity, Professor, Role, User
from cms_console.resolver import coerce_id
from cms_console.store import EntityStore


class FormSession:
    """Draft record bound to a store's selection.

    The draft follows the selection: selecting another entity (or clearing
    the selection after a successful save) silently replaces any unsaved
    edits. There is no "saving" state, so a double submit sends two
    requests.
    """

    required_fields: Tuple[str, ...] = ()
    required_message = "Required fields are missing"

    def __init__(self, store: EntityStore):
        self.store = store
        self.draft: Dict[str, Any] = self.empty_draft()
        store.add_listener(self._bind)

    def empty_draft(self) -> Dict[str, Any]:
        raise NotImplementedError

    def draft_from(self, entity: Entity) -> Dict[str, Any]:
        raise NotImplementedError

    def to_payload(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _bind(self, entity: Optional[Entity]) -> None:
        self.draft = self.empty_draft() if entity is None else self.draft_from(entity)

    @property
    def editing(self) -> bool:
        return self.store.selected is not None

    @property
    def mode(self) -> str:
        return "editing" if self.editing else "creating"

    def edit(self, entity: Entity) -> None:
        self.store.select(entity)

    def cancel(self) -> None:
        self.store.select(None)

    def set_field(self, name: str, value: Any) -> None:
        if name not in self.draft:
            raise KeyError(f"Unknown field '{name}'")
        self.draft[name] = value

    def update(self, values: Dict[str, Any]) -> None:
        unknown = [name for name in values if name != "id" and name not in self.draft]
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}", fields=unknown, local=True)
        for name, value in values.items():
            if name != "id":
                self.set_field(name, value)

    # Sub-list helpers
    def _append(self, field: str, item: Any) -> None:
        self.draft[field] = [*self.draft[field], item]

    def _update_at(self, field: str, index: int, item: Any) -> None:
        items = list(self.draft[field])
        items[index] = item
        self.draft[field] = items

    def _remove_at(self, field: str, index: int) -> None:
        items = list(self.draft[field])
        del items[index]
        self.draft[field] = items

    def missing_fields(self) -> List[str]:
        return [f for f in self.required_fields if _blank(self.draft.get(f))]

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ValidationError(self.required_message, fields=missing, local=True)

    async def submit(self) -> Optional[Entity]:
        """Check required fields locally, then create or update through the store"""
        self.validate()
        return await self.store.commit(self.to_payload())


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class CourseForm(FormSession):
    required_fields = ("title", "authorId")
    required_message = "Title and Professor are required!"

    def empty_draft(self) -> Dict[str, Any]:
        return {"title": "", "description": "", "category": "", "authorId": ""}

    def draft_from(self, course: Course) -> Dict[str, Any]:
        return {
            "title": course.title,
            "description": course.description,
            "category": course.category,
            "authorId": course.author_id,
        }

    def missing_fields(self) -> List[str]:
        missing = super().missing_fields()
        if "authorId" not in missing and coerce_id(self.draft["authorId"]) is None:
            missing.append("authorId")
        return missing

    def to_payload(self) -> Dict[str, Any]:
        return {**self.draft, "authorId": coerce_id(self.draft["authorId"])}


class ProfessorForm(FormSession):
    required_fields = ("name",)
    required_message = "Name is required"

    def empty_draft(self) -> Dict[str, Any]:
        return {
            "name": "",
            "bio": "",
            "skills": [""],
            "publications": [{"title": "", "year": ""}],
        }

    def draft_from(self, professor: Professor) -> Dict[str, Any]:
        return {
            "name": professor.name,
            "bio": professor.bio,
            "skills": list(professor.skills),
            "publications": [{"title": t, "year": y} for t, y in professor.publications.items()],
        }

    def set_field(self, name: str, value: Any) -> None:
        if name == "publications" and isinstance(value, dict):
            value = [{"title": t, "year": y} for t, y in value.items()]
        elif name == "publications":
            if not isinstance(value, list) or not all(isinstance(p, dict) for p in value):
                raise ValidationError("Publications must be a list of {title, year} entries",
                                      fields=[name], local=True)
            value = [{"title": p.get("title", ""), "year": p.get("year", "")} for p in value]
        elif name == "skills":
            if not isinstance(value, list) or not all(isinstance(s, str) for s in value):
                raise ValidationError("Skills must be a list of strings", fields=[name], local=True)
            value = list(value)
        super().set_field(name, value)

    def add_skill(self, skill: str = "") -> None:
        self._append("skills", skill)

    def update_skill(self, index: int, skill: str) -> None:
        self._update_at("skills", index, skill)

    def remove_skill(self, index: int) -> None:
        self._remove_at("skills", index)

    def add_publication(self, title: str = "", year: Any = "") -> None:
        self._append("publications", {"title": title, "year": year})

    def update_publication(self, index: int, field: str, value: Any) -> None:
        if field not in ("title", "year"):
            raise KeyError(f"Unknown publication field '{field}'")
        entry = copy.copy(self.draft["publications"][index])
        entry[field] = value
        self._update_at("publications", index, entry)

    def remove_publication(self, index: int) -> None:
        self._remove_at("publications", index)

    def to_payload(self) -> Dict[str, Any]:
        # Duplicate titles collapse into one key; the later entry wins.
        # TODO: decide with the backend owners whether duplicates should be rejected instead.
        publications = {
            p["title"]: p["year"]
            for p in self.draft["publications"]
            if not _blank(p.get("title")) and not _blank(p.get("year"))
        }
        return {
            "name": self.draft["name"],
            "bio": self.draft["bio"],
            "skills": [s for s in self.draft["skills"] if not _blank(s)],
            "publications": publications,
        }


class UserForm(FormSession):
    required_fields = ("name", "email")
    required_message = "Name and Email are required"

    def empty_draft(self) -> Dict[str, Any]:
        return {"name": "", "email": "", "role": Role.student.value, "courseIds": []}

    def draft_from(self, user: User) -> Dict[str, Any]:
        return {
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
            "courseIds": list(user.course_ids),
        }

    def set_field(self, name: str, value: Any) -> None:
        if name == "role":
            try:
                value = Role(value).value
            except ValueError:
                raise ValidationError(f"Unknown role '{value}'", fields=["role"], local=True)
        elif name == "courseIds":
            if not isinstance(value, list):
                raise ValidationError("Course ids must be a list", fields=[name], local=True)
            value = list(dict.fromkeys(cid for cid in map(coerce_id, value) if cid is not None))
        super().set_field(name, value)

    def enrolled(self, course_id: Any) -> bool:
        return coerce_id(course_id) in self.draft["courseIds"]

    def toggle_course(self, course_id: Any) -> None:
        cid = coerce_id(course_id)
        if cid is None:
            raise ValueError(f"Invalid course id {course_id!r}")
        if cid in self.draft["courseIds"]:
            self.draft["courseIds"] = [c for c in self.draft["courseIds"] if c != cid]
        else:
            self.draft["courseIds"] = [*self.draft["courseIds"], cid]

    def to_payload(self) -> Dict[str, Any]:
        return {**self.draft, "courseIds": list(dict.fromkeys(self.draft["courseIds"]))}
