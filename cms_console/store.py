# cms_console/store.py
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar
import logging

from cms_console.errors import NetworkError, UserCancelled
from cms_console.gateway import CourseGateway, EntityGateway
from cms_console.models import Course, Entity

logger = logging.getLogger("cms_console.store")

E = TypeVar("E", bound=Entity)

Confirm = Callable[[str], bool]
SelectionListener = Callable[[Optional[Any]], None]


def decline(message: str) -> bool:
    """Default prompt: without an interactive operator nothing gets deleted"""
    return False


class EntityStore(Generic[E]):
    """The current collection for one view plus at most one selected entity.

    ``selected is None`` means the view is creating a new entity. The
    collection is always replaced wholesale from the backend, never patched
    locally, so removed or edited entities only change after the follow-up
    ``load()`` returns.
    """

    def __init__(self, gateway: EntityGateway[E], confirm: Optional[Confirm] = None):
        self.gateway = gateway
        self.confirm = confirm or decline
        self.items: List[E] = []
        self.selected: Optional[E] = None
        # set when the reload after a saved change failed
        self.stale = False
        self._listeners: List[SelectionListener] = []

    @property
    def noun(self) -> str:
        return self.gateway.noun

    def add_listener(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def get(self, entity_id: int) -> Optional[E]:
        return next((e for e in self.items if e.id == entity_id), None)

    def replace(self, items: List[E]) -> None:
        self.items = list(items)

    async def load(self) -> List[E]:
        # selection survives a reload on purpose
        self.replace(await self.gateway.list())
        self.stale = False
        logger.info(f"Loaded {len(self.items)} {self.noun} records")
        return self.items

    async def _refresh(self) -> None:
        # the change is already saved; a failed reload must not report it as failed
        try:
            await self.load()
        except NetworkError as e:
            self.stale = True
            logger.warning(f"Reload of {self.noun} records failed after a saved change: {e.message}")

    def select(self, entity: Optional[E]) -> None:
        self.selected = entity
        for listener in self._listeners:
            listener(entity)

    async def commit(self, draft: Dict[str, Any]) -> Optional[E]:
        """Create when nothing is selected, otherwise update the selection.

        On failure the selection (and therefore the form draft) is left as is
        and the error propagates. A failed reload afterwards only marks the
        collection ``stale``.
        """
        if self.selected is not None:
            logger.info(f"Updating {self.noun} {self.selected.id}")
            saved = await self.gateway.update(self.selected.id, draft)
        else:
            logger.info(f"Creating {self.noun}")
            saved = await self.gateway.create(draft)
        self.select(None)
        await self._refresh()
        return saved

    async def remove(self, entity_id: int, confirm: Optional[Confirm] = None) -> None:
        prompt = confirm or self.confirm
        if not prompt(f"Are you sure you want to delete this {self.noun}?"):
            logger.info(f"Deletion of {self.noun} {entity_id} cancelled")
            raise UserCancelled(f"Deletion of {self.noun} {entity_id} was cancelled")

        await self.gateway.remove(entity_id)
        logger.info(f"Deleted {self.noun} {entity_id}")
        if self.selected is not None and self.selected.id == entity_id:
            self.select(None)
        await self._refresh()


class CourseStore(EntityStore[Course]):
    gateway: CourseGateway

    async def fetch_matching(self, keyword: Optional[str] = None, professor_id: Optional[int] = None) -> List[Course]:
        """Ask the backend for matching courses without touching the collection"""
        if keyword:
            return await self.gateway.search(keyword)
        if professor_id is not None:
            return await self.gateway.filter_by_professor(professor_id)
        return await self.gateway.list()
