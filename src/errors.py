"""Error taxonomy shared by the versioning core, repositories and HTTP layer.

Every error carries a stable ``code`` so callers can branch on the kind of
failure, and an HTTP ``status_code`` used by the FastAPI exception handler.
"""

from __future__ import annotations


class CmsError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.message, "code": self.code}
        if self.field is not None:
            body["field"] = self.field
        return body


class NotFoundError(CmsError):
    """Entity or requested history version does not exist."""

    status_code = 404
    code = "NOT_FOUND"


class ConflictError(CmsError):
    """Unique-key collision or stale optimistic-lock version."""

    status_code = 409
    code = "CONFLICT"


class ValidationFailure(CmsError):
    """Missing/invalid input: required fields, empty patch, bad enum, bad version."""

    status_code = 400
    code = "VALIDATION_FAILED"


class StorageFailure(CmsError):
    """The backing store rejected or could not complete the operation.

    The message is always generic; details are logged, never returned.
    """

    status_code = 500
    code = "STORAGE_FAILURE"

    def __init__(self, message: str = "The storage service could not complete the request") -> None:
        super().__init__(message)


class ConfigurationError(RuntimeError):
    """Fatal startup misconfiguration (e.g. DATABASE_URL missing)."""
