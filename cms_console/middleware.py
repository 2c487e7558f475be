# cms_console/middleware.py
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from cms_console import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("cms_console")

ACTIONS = {"GET": "view", "POST": "save", "PUT": "save", "DELETE": "delete"}


def section(request: Request) -> str:
    """Console screen a request belongs to, e.g. "courses" for /console/courses/3"""
    parts = [p for p in request.url.path.split("/") if p]
    if len(parts) >= 2 and parts[0] == "console":
        return parts[1]
    return "root"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each console action with its screen, outcome and duration"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        action = f"{ACTIONS.get(request.method, request.method.lower())} {section(request)}"
        params = dict(request.query_params)
        logger.info(f"{action} started | {request.method} {request.url.path}" + (f" | {params}" if params else ""))

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{action} crashed after {time.perf_counter() - started:.3f}s: {str(e)}")
            raise

        elapsed = time.perf_counter() - started
        if response.status_code >= 400:
            logger.warning(f"{action} failed with {response.status_code} after {elapsed:.3f}s")
        else:
            logger.info(f"{action} done with {response.status_code} after {elapsed:.3f}s")
        return response
