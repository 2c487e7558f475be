# cms_console/gateway.py
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import logging

import httpx
from pydantic import ValidationError as SchemaError

from cms_console import config
from cms_console.errors import NetworkError, ValidationError
from cms_console.models import Course, Entity, Professor, User

logger = logging.getLogger("cms_console.gateway")

E = TypeVar("E", bound=Entity)


def create_client(base_url: Optional[str] = None, timeout: Optional[float] = None, **kwargs) -> httpx.AsyncClient:
    """Build the shared backend client; no auth headers, no timeout unless configured"""
    return httpx.AsyncClient(
        base_url=base_url or config.BACKEND_URL,
        timeout=timeout if timeout is not None else config.REQUEST_TIMEOUT,
        **kwargs,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Unknown error"
    if isinstance(body, dict):
        detail = body.get("detail", body.get("message", body))
    else:
        detail = body
    if isinstance(detail, list):
        # FastAPI-style validation errors
        return "; ".join(
            f"{'.'.join(str(p) for p in item.get('loc', [])[1:])}: {item.get('msg')}"
            if isinstance(item, dict) else str(item)
            for item in detail
        )
    return str(detail)


class EntityGateway(Generic[E]):
    """List/create/update/remove for one backend collection.

    Every call is a single attempt. Failures are raised to the caller as
    ``NetworkError`` or ``ValidationError`` and never retried.
    """

    path: str = ""
    model: Type[E]
    noun: str = "entity"

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _send(self, method: str, path: str, **kwargs) -> Any:
        logger.info(f"{method} {path}")
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling backend {method} {path}: {str(e)}")
            raise NetworkError(f"The backend did not respond to {method} {path}", status_code=504)
        except httpx.ConnectError as e:
            logger.error(f"Connection error calling backend {method} {path}: {str(e)}")
            raise NetworkError(
                "Unable to connect to the backend. Please check if the service is running.",
                status_code=503,
            )
        except httpx.RequestError as e:
            logger.error(f"Request error calling backend {method} {path}: {str(e)}")
            raise NetworkError(f"Error communicating with the backend: {str(e)}", status_code=502)

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"Backend returned error: {response.status_code} - {message}")
            if response.status_code in (400, 422):
                raise ValidationError(message)
            raise NetworkError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise NetworkError(f"Malformed response from {method} {path}")

    def _parse(self, data: Any) -> E:
        try:
            return self.model.model_validate(data)
        except SchemaError as e:
            logger.error(f"Unexpected {self.noun} payload: {str(e)}")
            raise NetworkError(f"Malformed {self.noun} received from the backend")

    def _parse_list(self, data: Any) -> List[E]:
        if not isinstance(data, list):
            raise NetworkError(f"Expected a list of {self.noun} records from the backend")
        return [self._parse(item) for item in data]

    def _item_path(self, entity_id: int) -> str:
        return f"{self.path}/{entity_id}"

    async def list(self) -> List[E]:
        return self._parse_list(await self._send("GET", self.path))

    async def create(self, draft: Dict[str, Any]) -> Optional[E]:
        data = await self._send("POST", self.path, json=draft)
        return self._parse(data) if data is not None else None

    async def update(self, entity_id: int, patch: Dict[str, Any]) -> Optional[E]:
        data = await self._send("PUT", self._item_path(entity_id), json=patch)
        return self._parse(data) if data is not None else None

    async def remove(self, entity_id: int) -> None:
        await self._send("DELETE", self._item_path(entity_id))


class CourseGateway(EntityGateway[Course]):
    path = "/courses"
    model = Course
    noun = "course"

    async def search(self, keyword: str) -> List[Course]:
        return self._parse_list(await self._send("GET", f"{self.path}/search", params={"q": keyword}))

    async def filter_by_professor(self, professor_id: int) -> List[Course]:
        return self._parse_list(
            await self._send("GET", f"{self.path}/filter", params={"professorId": professor_id})
        )


class ProfessorGateway(EntityGateway[Professor]):
    path = "/professors"
    model = Professor
    noun = "professor"


class UserGateway(EntityGateway[User]):
    path = "/users"
    model = User
    noun = "user"
