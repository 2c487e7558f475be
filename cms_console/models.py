# cms_console/models.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional, Union
from enum import Enum


class Role(str, Enum):
    student = "student"
    visitor = "visitor"
    admin = "admin"


class Entity(BaseModel):
    """Server-owned record; ids are always assigned by the backend"""
    model_config = ConfigDict(populate_by_name=True)

    id: int


class Course(Entity):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    # Unresolvable or missing authors render as "Unknown" rather than failing the list
    author_id: Optional[int] = Field(default=None, alias="authorId")


class Professor(Entity):
    name: str
    bio: Optional[str] = None
    skills: List[str] = []
    publications: Dict[str, Union[str, int]] = {}


class User(Entity):
    name: str
    email: str
    role: Role = Role.student
    course_ids: List[int] = Field(default=[], alias="courseIds")

    @field_validator("course_ids")
    @classmethod
    def dedupe_course_ids(cls, value: List[int]) -> List[int]:
        # transported as a sequence, treated as a set
        return list(dict.fromkeys(value))
