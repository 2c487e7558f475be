# cms_console/search.py
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar
import asyncio
import logging

from cms_console import config
from cms_console.store import CourseStore

logger = logging.getLogger("cms_console.search")

T = TypeVar("T")


class DebouncedSearch(Generic[T]):
    """Keystroke search that only queries after a quiet period.

    Each ``submit`` supersedes the previous one: a pending delay is
    cancelled, an in-flight request is cancelled, and any response that
    still arrives for an older sequence number is discarded instead of
    being applied.
    """

    def __init__(
        self,
        fetch: Callable[[str], Awaitable[T]],
        apply: Callable[[T], None],
        delay: Optional[float] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.fetch = fetch
        self.apply = apply
        self.delay = config.SEARCH_DEBOUNCE_MS / 1000 if delay is None else delay
        self.on_error = on_error
        self.sequence = 0
        self.applied_sequence = 0
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def for_courses(cls, store: CourseStore, delay: Optional[float] = None,
                    on_error: Optional[Callable[[Exception], None]] = None) -> "DebouncedSearch[List]":
        return cls(
            fetch=lambda keyword: store.fetch_matching(keyword=keyword or None),
            apply=store.replace,
            delay=delay,
            on_error=on_error,
        )

    def submit(self, query: str) -> asyncio.Task:
        self.sequence += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run(self.sequence, query))
        return self._task

    async def _run(self, sequence: int, query: str) -> None:
        await asyncio.sleep(self.delay)
        try:
            result = await self.fetch(query)
        except Exception as e:
            if sequence != self.sequence:
                logger.debug(f"Dropping error from superseded search #{sequence}: {str(e)}")
                return
            if self.on_error is None:
                raise
            self.on_error(e)
            return
        if sequence != self.sequence:
            logger.debug(f"Discarding stale search #{sequence} for {query!r}")
            return
        self.apply(result)
        self.applied_sequence = sequence

    async def flush(self) -> None:
        """Wait for the latest submitted search to finish"""
        while self._task is not None:
            task = self._task
            try:
                await task
            except asyncio.CancelledError:
                # superseded while waiting; wait for the replacement instead
                if task is self._task or not task.cancelled():
                    raise
                continue
            if task is self._task:
                return
