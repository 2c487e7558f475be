# cms_backend/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Union
from enum import Enum


class Role(str, Enum):
    student = "student"
    visitor = "visitor"
    admin = "admin"


class Course(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    author_id: int = Field(alias="authorId")

class CourseCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    author_id: int = Field(alias="authorId")

class CourseUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    author_id: Optional[int] = Field(default=None, alias="authorId")


class Professor(BaseModel):
    id: int
    name: str
    bio: Optional[str] = None
    skills: List[str] = []
    publications: Dict[str, Union[str, int]] = {}

class ProfessorCreate(BaseModel):
    name: str = Field(min_length=1)
    bio: Optional[str] = None
    skills: List[str] = []
    publications: Dict[str, Union[str, int]] = {}

class ProfessorUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    skills: Optional[List[str]] = None
    publications: Optional[Dict[str, Union[str, int]]] = None


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    email: str
    role: Role = Role.student
    course_ids: List[int] = Field(default=[], alias="courseIds")

class UserCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    role: Role = Role.student
    course_ids: List[int] = Field(default=[], alias="courseIds")

class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=1)
    role: Optional[Role] = None
    course_ids: Optional[List[int]] = Field(default=None, alias="courseIds")
