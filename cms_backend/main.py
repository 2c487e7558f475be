# cms_backend/main.py
from fastapi import APIRouter, FastAPI, HTTPException, Query, status
from cms_backend.models import (
    Course, CourseCreate, CourseUpdate,
    Professor, ProfessorCreate, ProfessorUpdate,
    User, UserCreate, UserUpdate,
)
from cms_backend.service import CatalogService
from typing import List, Optional
import logging

logger = logging.getLogger("cms_backend")


def build_router(catalog: CatalogService) -> APIRouter:
    router = APIRouter()

    # Course routes; search and filter are declared before /courses/{course_id}
    @router.get("/courses", response_model=List[Course])
    def get_all_courses():
        """Get all courses"""
        return catalog.courses.get_all()

    @router.get("/courses/search", response_model=List[Course])
    def search_courses(q: Optional[str] = None):
        """Search courses by keyword"""
        return catalog.courses.search(q)

    @router.get("/courses/filter", response_model=List[Course])
    def filter_courses(professor_id: Optional[int] = Query(default=None, alias="professorId")):
        """Filter courses by professor"""
        return catalog.courses.filter_by_professor(professor_id)

    @router.get("/courses/{course_id}", response_model=Course)
    def get_course(course_id: int):
        """Get a course by ID"""
        course = catalog.courses.get_by_id(course_id)
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    @router.post("/courses", response_model=Course, status_code=status.HTTP_201_CREATED)
    def create_course(course: CourseCreate):
        """Create a new course"""
        logger.info(f"Creating course '{course.title}'")
        return catalog.courses.create(course)

    @router.put("/courses/{course_id}", response_model=Course)
    def update_course(course_id: int, course: CourseUpdate):
        """Update a course"""
        updated_course = catalog.courses.update(course_id, course)
        if not updated_course:
            raise HTTPException(status_code=404, detail="Course not found")
        return updated_course

    @router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_course(course_id: int):
        """Delete a course"""
        success = catalog.courses.delete(course_id)
        if not success:
            raise HTTPException(status_code=404, detail="Course not found")
        return None

    # Professor routes
    @router.get("/professors", response_model=List[Professor])
    def get_all_professors():
        """Get all professors"""
        return catalog.professors.get_all()

    @router.get("/professors/{professor_id}", response_model=Professor)
    def get_professor(professor_id: int):
        """Get a professor by ID"""
        professor = catalog.professors.get_by_id(professor_id)
        if not professor:
            raise HTTPException(status_code=404, detail="Professor not found")
        return professor

    @router.post("/professors", response_model=Professor, status_code=status.HTTP_201_CREATED)
    def create_professor(professor: ProfessorCreate):
        """Create a new professor"""
        logger.info(f"Creating professor '{professor.name}'")
        return catalog.professors.create(professor)

    @router.put("/professors/{professor_id}", response_model=Professor)
    def update_professor(professor_id: int, professor: ProfessorUpdate):
        """Update a professor"""
        updated_professor = catalog.professors.update(professor_id, professor)
        if not updated_professor:
            raise HTTPException(status_code=404, detail="Professor not found")
        return updated_professor

    @router.delete("/professors/{professor_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_professor(professor_id: int):
        """Delete a professor"""
        success = catalog.professors.delete(professor_id)
        if not success:
            raise HTTPException(status_code=404, detail="Professor not found")
        return None

    # User routes
    @router.get("/users", response_model=List[User])
    def get_all_users():
        """Get all users"""
        return catalog.users.get_all()

    @router.get("/users/{user_id}", response_model=User)
    def get_user(user_id: int):
        """Get a user by ID"""
        user = catalog.users.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
    def create_user(user: UserCreate):
        """Create a new user"""
        logger.info(f"Creating user '{user.email}'")
        return catalog.users.create(user)

    @router.put("/users/{user_id}", response_model=User)
    def update_user(user_id: int, user: UserUpdate):
        """Update a user"""
        updated_user = catalog.users.update(user_id, user)
        if not updated_user:
            raise HTTPException(status_code=404, detail="User not found")
        return updated_user

    @router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_user(user_id: int):
        """Delete a user"""
        success = catalog.users.delete(user_id)
        if not success:
            raise HTTPException(status_code=404, detail="User not found")
        return None

    return router


def create_app() -> FastAPI:
    """Build a backend app with its own freshly seeded catalog"""
    backend = FastAPI(title="CMS Backend", version="1.0.0")
    backend.state.catalog = CatalogService()

    @backend.get("/")
    def read_root():
        return {"message": "CMS Backend is running"}

    backend.include_router(build_router(backend.state.catalog))
    return backend


app = create_app()
