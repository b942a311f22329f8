"""Error hierarchy raised by the notification clients.

Every error keeps an optional ``cause``: either the lower-level exception
(transport failures, identity lookup failures) or a ``ResponseErrorCause``
snapshot of the HTTP response that triggered it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ResponseErrorCause:
    url: str
    redirection: bool
    status: int
    status_text: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""


class NotificationsError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str, cause: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def response(self) -> Optional[ResponseErrorCause]:
        return self.cause if isinstance(self.cause, ResponseErrorCause) else None

    @property
    def status(self) -> Optional[int]:
        r = self.response
        return r.status if r else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class ArgumentError(NotificationsError):
    """Invalid constructor input (bad base URL, missing token or organization)."""


class FetchError(NotificationsError):
    """The HTTP call itself could not be completed."""


class AuthorizationError(NotificationsError):
    """HTTP 401/403."""


class ResponseError(NotificationsError):
    """Non-200 or unparsable response."""


class NotFoundError(ResponseError):
    """HTTP 404."""


class InitError(NotificationsError):
    """Identity lookup failed for a reason other than authorization."""
