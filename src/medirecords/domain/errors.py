"""
Domain-specific error types for the record access taxonomy.

These are the only failures callers of the record access use case see.
Messages are safe to show to API clients; internal detail stays in logs.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthenticatedError(DomainError):
    """Caller could not be authenticated."""

    def __init__(self) -> None:
        super().__init__("Authentication required", "UNAUTHENTICATED")


class BadRequestError(DomainError):
    """Request parameters are malformed."""

    def __init__(self, message: str = "Invalid request") -> None:
        super().__init__(message, "BAD_REQUEST")


class RecordNotFoundError(DomainError):
    """Patient record not found."""

    def __init__(self, record_id: str) -> None:
        super().__init__("Patient not found", "RECORD_NOT_FOUND", {"record_id": record_id})


class AuditWriteFailedError(DomainError):
    """The view could not be recorded in the audit trail, so no data is released."""

    def __init__(self) -> None:
        super().__init__("Unable to record access; record not returned", "AUDIT_WRITE_FAILED")


class InternalServiceError(DomainError):
    """Catch-all for store faults and unexpected errors."""

    def __init__(self) -> None:
        super().__init__("Internal server error", "INTERNAL_ERROR")


class RequestTimeoutError(DomainError):
    """The view did not complete within its deadline."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            "Request timed out", "TIMEOUT", {"timeout_seconds": timeout_seconds}
        )
