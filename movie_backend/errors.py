"""Error taxonomy shared by the auth gate, the stores and the route handlers.

Every error carries the HTTP status and the message shown to clients; the
API layer renders them as ``{"message": ..., **extra}``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ApiError(Exception):
    status_code: int = 500
    message: str = "Something went wrong!"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_body(self, *, expose_detail: bool = False) -> Dict[str, Any]:
        return {"message": self.message}


class Unauthenticated(ApiError):
    status_code = 401
    message = "Access token required"


class InvalidToken(ApiError):
    status_code = 403
    message = "Invalid or expired token"


class UnknownSubject(ApiError):
    status_code = 403
    message = "User not found"


class InvalidCredentials(ApiError):
    status_code = 401
    message = "Invalid email or password"


class NotFound(ApiError):
    status_code = 404
    message = "Movie not found"


class NoFieldsProvided(ApiError):
    status_code = 400
    message = "No fields to update"


class Conflict(ApiError):
    status_code = 409
    message = "Email already registered"


class ValidationFailed(ApiError):
    """Carries every field-level problem found, not just the first one."""

    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]) -> None:
        super().__init__()
        self.errors = list(errors)

    def to_body(self, *, expose_detail: bool = False) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}


class StoreUnavailable(ApiError):
    status_code = 500
    message = "Database error"

    def __init__(self, detail: str = "") -> None:
        super().__init__()
        # Logged server-side; only echoed to clients outside production.
        self.detail = detail

    def to_body(self, *, expose_detail: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if expose_detail and self.detail:
            body["error"] = self.detail
        return body
