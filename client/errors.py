"""Errors raised by the task store client."""
from typing import Callable, Optional

# Receives a user-facing failure notice
Notifier = Callable[[str], None]


class ApiError(Exception):
    """A task store call did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(ApiError):
    """401: the session token is missing, invalid or expired."""


class NotFoundError(ApiError):
    """404: the addressed task or project does not exist."""


class ServerError(ApiError):
    """Any other non-2xx answer."""


class NetworkError(ApiError):
    """The request never got an answer (connection error, timeout)."""
