# cms_console/config.py
import logging
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("cms_console")


def _float_or_none(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; no timeout will be applied")
        return None


def _int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
        return default


# Backend configuration
BACKEND_URL = os.getenv("CMS_BACKEND_URL", "http://localhost:8080").rstrip("/")
# None disables the httpx timeout entirely
REQUEST_TIMEOUT = _float_or_none("CMS_REQUEST_TIMEOUT")

SEARCH_DEBOUNCE_MS = _int("CMS_SEARCH_DEBOUNCE_MS", 300)

LOG_LEVEL = os.getenv("CMS_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CMS_CORS_ORIGINS", "*").split(",") if o.strip()]

HOST = os.getenv("CMS_HOST", "127.0.0.1")
PORT = _int("CMS_PORT", 8000)
