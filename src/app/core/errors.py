"""Domain error taxonomy.

Services raise these; the handlers in ``core.exceptions`` map them to HTTP
responses. Each error carries a stable machine-readable ``code``.
"""

from typing import Any


class DomainError(Exception):
    """Base exception for project lifecycle and hour budget failures."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = 500,
    ):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed or missing input. Recoverable by correcting the request."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__("VALIDATION_ERROR", message, details, status_code=400)


class NotFoundError(DomainError):
    """Referenced resource does not exist."""

    def __init__(self, resource: str, resource_id: object):
        super().__init__(
            "NOT_FOUND",
            f"{resource} not found",
            {"resource": resource, "id": str(resource_id)},
            status_code=404,
        )


class ConflictError(DomainError):
    """Operation is legal in isolation but violates current state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__("CONFLICT", message, details, status_code=409)


class ConcurrencyError(DomainError):
    """Row lock could not be acquired in time. Safe to retry."""

    def __init__(self, message: str = "Project is busy, please retry"):
        super().__init__("CONCURRENCY_ERROR", message, {"retryable": True}, status_code=409)
