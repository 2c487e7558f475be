"""
Tests for debounced keystroke search.

Only the last query inside the quiet window is sent, and a response that
belongs to a superseded query is never applied.
"""

import asyncio

import pytest

from cms_console.console import Console
from cms_console.errors import NetworkError
from cms_console.search import DebouncedSearch

pytestmark = pytest.mark.anyio


async def test_rapid_keystrokes_send_one_request():
    calls, applied = [], []

    async def fetch(query):
        calls.append(query)
        return [query]

    search = DebouncedSearch(fetch, applied.append, delay=0.02)
    for query in ("s", "sy", "sys"):
        search.submit(query)
    await search.flush()

    assert calls == ["sys"]
    assert applied == [["sys"]]
    assert search.applied_sequence == 3


async def test_stale_response_is_discarded():
    applied = []
    old_started = asyncio.Event()

    async def fetch(query):
        if query == "old":
            old_started.set()
            try:
                await asyncio.sleep(0.05)
            except asyncio.CancelledError:
                # a response that arrives despite the cancellation
                pass
            return ["old"]
        return ["new"]

    search = DebouncedSearch(fetch, applied.append, delay=0)
    first = search.submit("old")
    await old_started.wait()
    search.submit("new")
    await search.flush()
    await asyncio.wait([first])

    assert applied == [["new"]]


async def test_errors_surface_on_flush():
    async def fetch(query):
        raise NetworkError("backend down", status_code=503)

    search = DebouncedSearch(fetch, lambda result: None, delay=0)
    search.submit("x")
    with pytest.raises(NetworkError):
        await search.flush()

    errors = []
    search = DebouncedSearch(fetch, lambda result: None, delay=0, on_error=errors.append)
    search.submit("x")
    await search.flush()
    assert [e.status_code for e in errors] == [503]


async def test_console_live_search(client):
    console = Console(client)
    store = console.courses
    search = console.live_search(delay=0)

    search.submit("cloud")
    await search.flush()
    assert [c.id for c in store.items] == [2]

    search.submit("")
    await search.flush()
    assert len(store.items) == 3
