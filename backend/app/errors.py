"""Service-level errors, rendered as ``{"message": ...}`` by the app's exception handlers."""
from __future__ import annotations


class MemoServiceError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(MemoServiceError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(MemoServiceError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(MemoServiceError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(MemoServiceError):
    status_code = 404
    default_message = "Not found"
