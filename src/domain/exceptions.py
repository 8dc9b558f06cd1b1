"""
Domain error taxonomy.

Every error carries the HTTP status the API layer answers with, so the
exception handlers in ``src.api.app`` need no per-type mapping table.
"""


class QueueServiceError(Exception):
    """Base class for every expected failure raised by the services."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QueueServiceError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class AuthError(QueueServiceError):
    """Missing, malformed, invalid or expired credential."""

    status_code = 401


class ForbiddenError(QueueServiceError):
    """Authenticated, but the role may not perform the operation."""

    status_code = 403


class NotFoundError(QueueServiceError):
    status_code = 404


class ConflictError(QueueServiceError):
    """Duplicate unique identity or a contested queue transition."""

    status_code = 409


class InternalError(QueueServiceError):
    status_code = 500
