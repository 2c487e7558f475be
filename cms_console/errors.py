# cms_console/errors.py
from typing import List, Optional


class ConsoleError(Exception):
    """Base for every error surfaced to the operator as a single notification"""

    error = "Console Error"
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NetworkError(ConsoleError):
    """Transport failure or non-2xx backend response"""

    error = "Network Error"
    status_code = 502


class ValidationError(ConsoleError):
    """Payload rejected, either by the backend or by a local required-field check"""

    error = "Validation Error"
    status_code = 422

    def __init__(self, message: str, fields: Optional[List[str]] = None, local: bool = False):
        super().__init__(message)
        self.fields = list(fields or [])
        self.local = local


class UserCancelled(ConsoleError):
    """The operator declined a destructive-action confirmation"""

    error = "Cancelled"
    status_code = 409
