# cms_console/main.py
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional
import asyncio
import logging

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cms_console import config
from cms_console.console import Console
from cms_console.errors import ConsoleError, ValidationError
from cms_console.forms import FormSession
from cms_console.gateway import create_client
from cms_console.middleware import LoggingMiddleware, section
from cms_console.models import Entity
from cms_console.resolver import course_row, filter_courses, initials
from cms_console.store import Confirm, EntityStore

logger = logging.getLogger("cms_console")

router = APIRouter(prefix="/console")


def get_console(request: Request) -> Console:
    return request.app.state.console


async def read_draft(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


async def find_or_404(store: EntityStore, entity_id: int) -> Entity:
    entity = None if store.stale else store.get(entity_id)
    if entity is None:
        await store.load()
        entity = store.get(entity_id)
    if entity is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "Not Found", "message": f"{store.noun.capitalize()} {entity_id} not found"},
        )
    return entity


def dump(entity: Optional[Entity]) -> Optional[Dict[str, Any]]:
    return entity.model_dump(by_alias=True, mode="json") if entity is not None else None


def notification(request: Request, status_code: int, error: str, message: Any, **extra) -> JSONResponse:
    """The single blocking message the console shows for a failed action"""
    content = {
        "error": error,
        "message": message,
        "status_code": status_code,
        "path": str(request.url.path),
        **extra,
    }
    return JSONResponse(status_code=status_code, content=content)


def answer(confirm: bool) -> Confirm:
    return lambda message: confirm


async def save_new(console: Console, form: FormSession, draft: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    async with console.editing(form.store):
        form.cancel()
        form.update(draft)
        return dump(await form.submit())


async def save_existing(console: Console, form: FormSession, entity_id: int,
                        draft: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    async with console.editing(form.store):
        form.edit(await find_or_404(form.store, entity_id))
        form.update(draft)
        return dump(await form.submit())


# Dashboard
@router.get("/dashboard")
async def get_dashboard(console: Console = Depends(get_console)):
    """Counts and chart series over all three collections"""
    return await console.dashboard()


# Courses
@router.get("/courses")
async def list_courses(
    q: Optional[str] = None,
    professor_id: Optional[str] = Query(default=None, alias="professorId"),
    console: Console = Depends(get_console),
):
    """List courses, searched or filtered by the backend"""
    courses, professors = await asyncio.gather(
        filter_courses(console.courses, keyword=q, professor_id=professor_id),
        console.professors.load(),
    )
    return [course_row(c, professors) for c in courses]


@router.post("/courses", status_code=status.HTTP_201_CREATED)
async def create_course(request: Request, console: Console = Depends(get_console)):
    """Create a course from a draft"""
    return await save_new(console, console.course_form, await read_draft(request))


@router.put("/courses/{course_id}")
async def update_course(course_id: int, request: Request, console: Console = Depends(get_console)):
    """Edit a course; fields missing from the body keep their current values"""
    return await save_existing(console, console.course_form, course_id, await read_draft(request))


@router.delete("/courses/{course_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_course(course_id: int, confirm: bool = False, console: Console = Depends(get_console)):
    """Delete a course once confirmed"""
    async with console.editing(console.courses):
        await console.courses.remove(course_id, confirm=answer(confirm))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Professors
@router.get("/professors")
async def list_professors(console: Console = Depends(get_console)):
    """List professors with avatar initials"""
    professors = await console.professors.load()
    return [{**dump(p), "initials": initials(p.name)} for p in professors]


@router.post("/professors", status_code=status.HTTP_201_CREATED)
async def create_professor(request: Request, console: Console = Depends(get_console)):
    """Create a professor; publications are sent as a list of {title, year}"""
    return await save_new(console, console.professor_form, await read_draft(request))


@router.put("/professors/{professor_id}")
async def update_professor(professor_id: int, request: Request, console: Console = Depends(get_console)):
    """Edit a professor"""
    return await save_existing(console, console.professor_form, professor_id, await read_draft(request))


@router.delete("/professors/{professor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_professor(professor_id: int, confirm: bool = False, console: Console = Depends(get_console)):
    """Delete a professor once confirmed"""
    async with console.editing(console.professors):
        await console.professors.remove(professor_id, confirm=answer(confirm))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Users
@router.get("/users")
async def list_users(console: Console = Depends(get_console)):
    """List users with their enrolment counts"""
    users = await console.users.load()
    return [{**dump(u), "enrolledCount": len(u.course_ids)} for u in users]


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(request: Request, console: Console = Depends(get_console)):
    """Create a user"""
    return await save_new(console, console.user_form, await read_draft(request))


@router.put("/users/{user_id}")
async def update_user(user_id: int, request: Request, console: Console = Depends(get_console)):
    """Edit a user"""
    return await save_existing(console, console.user_form, user_id, await read_draft(request))


@router.post("/users/{user_id}/courses/{course_id}/toggle")
async def toggle_user_course(user_id: int, course_id: int, console: Console = Depends(get_console)):
    """Enrol the user in the course, or drop it if already enrolled"""
    form = console.user_form
    async with console.editing(console.users):
        form.edit(await find_or_404(console.users, user_id))
        form.toggle_course(course_id)
        return dump(await form.submit())


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: int, confirm: bool = False, console: Console = Depends(get_console)):
    """Delete a user once confirmed"""
    async with console.editing(console.users):
        await console.users.remove(user_id, confirm=answer(confirm))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(client: Optional[httpx.AsyncClient] = None, confirm: Optional[Confirm] = None) -> FastAPI:
    console = Console(client or create_client(), confirm)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await console.aclose()

    app = FastAPI(title="CMS Console", version="1.0.0", lifespan=lifespan)
    app.state.console = console

    # Add logging middleware
    app.add_middleware(LoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def read_root():
        return {
            "message": "CMS Console is running",
            "backend": str(console.client.base_url),
            "version": "1.0.0",
        }

    app.include_router(router)

    @app.exception_handler(ConsoleError)
    async def console_error_handler(request: Request, exc: ConsoleError):
        """One notification per failed action"""
        logger.warning(f"{exc.error} on {section(request)}: {exc.status_code} - {exc.message}")
        extra = {"fields": exc.fields} if isinstance(exc, ValidationError) and exc.fields else {}
        return notification(request, exc.status_code, exc.error, exc.message, **extra)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
        logger.warning(f"{section(request)}: {exc.status_code} - {detail.get('message')}")
        return notification(request, exc.status_code, detail.get("error", "Error"), detail.get("message"))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {section(request)}: {str(exc)}")
        return notification(request, status.HTTP_500_INTERNAL_SERVER_ERROR,
                            "Internal Server Error", "An unexpected error occurred")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("cms_console.main:app", host=config.HOST, port=config.PORT)
