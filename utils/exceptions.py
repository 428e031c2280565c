"""Shared exception types for cross-module use."""

from __future__ import annotations

from typing import Optional


class NotAuthenticated(RuntimeError):
    """Raised when a data call is attempted without an admin token."""

    def __init__(self, message: str = "Sign in with an admin token first.") -> None:
        super().__init__(message)


class RequestFailed(RuntimeError):
    """Raised for any unsuccessful call to the admin API.

    ``status`` is the HTTP status code, or ``None`` when the server could
    not be reached at all.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)

    @classmethod
    def from_status(cls, status: int, body: object = None) -> "RequestFailed":
        message = None
        if isinstance(body, dict):
            message = body.get("error")
        if not message:
            message = f"Request failed ({status})"
        return cls(str(message), status=status)


__all__ = ["NotAuthenticated", "RequestFailed"]
