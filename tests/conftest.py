import httpx
import pytest

from cms_backend.main import create_app as create_backend
from cms_console.gateway import create_client


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend():
    """A freshly seeded in-memory backend"""
    return create_backend()


@pytest.fixture
def client(backend):
    return create_client(base_url="http://backend", transport=httpx.ASGITransport(app=backend))


class Recorder:
    """MockTransport handler that records requests and replays canned responses"""

    def __init__(self, responses=None):
        self.requests = []
        self.responses = dict(responses or {})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        result = self.responses.get(key, (200, []))
        if isinstance(result, type) and issubclass(result, Exception):
            raise result("simulated failure", request=request)
        status_code, body = result
        if body is None:
            return httpx.Response(status_code)
        return httpx.Response(status_code, json=body)

    @property
    def calls(self):
        return [(r.method, r.url.path) for r in self.requests]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def recorded_client(recorder):
    return create_client(base_url="http://backend", transport=httpx.MockTransport(recorder))
