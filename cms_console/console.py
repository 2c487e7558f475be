# cms_console/console.py
from typing import Any, Dict, Optional
import asyncio

import httpx

from cms_console.forms import CourseForm, ProfessorForm, UserForm
from cms_console.gateway import CourseGateway, ProfessorGateway, UserGateway
from cms_console.resolver import dashboard_summary
from cms_console.search import DebouncedSearch
from cms_console.store import Confirm, CourseStore, EntityStore


class Console:
    """One operator's stores and form sessions over a shared backend client"""

    def __init__(self, client: httpx.AsyncClient, confirm: Optional[Confirm] = None):
        self.client = client
        self.courses = CourseStore(CourseGateway(client), confirm)
        self.professors = EntityStore(ProfessorGateway(client), confirm)
        self.users = EntityStore(UserGateway(client), confirm)

        self.course_form = CourseForm(self.courses)
        self.professor_form = ProfessorForm(self.professors)
        self.user_form = UserForm(self.users)

        # one form session per kind, so each select/edit/submit runs alone
        self._locks = {store.noun: asyncio.Lock() for store in (self.courses, self.professors, self.users)}

    def editing(self, store: EntityStore) -> asyncio.Lock:
        return self._locks[store.noun]

    def live_search(self, delay: Optional[float] = None, on_error=None) -> DebouncedSearch:
        return DebouncedSearch.for_courses(self.courses, delay=delay, on_error=on_error)

    async def load_all(self) -> None:
        await asyncio.gather(self.courses.load(), self.users.load(), self.professors.load())

    async def dashboard(self) -> Dict[str, Any]:
        await self.load_all()
        return dashboard_summary(self.courses.items, self.users.items, self.professors.items)

    async def aclose(self) -> None:
        await self.client.aclose()
