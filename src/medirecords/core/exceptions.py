"""
Exception handling for MediRecords application.

Collaborator-native errors raised by infrastructure (record store, audit
store, authentication). The record access use case translates these into the
domain taxonomy in ``medirecords.domain.errors``; they never reach API callers.
"""

from typing import Any, Dict, Optional


class MediRecordsException(Exception):
    """Base exception class for MediRecords application."""

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


class RepositoryError(MediRecordsException):
    """Raised when the record store cannot serve a lookup."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "REPOSITORY_ERROR", details)


class AuditStoreError(MediRecordsException):
    """Raised when an audit entry could not be durably written."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, "AUDIT_STORE_ERROR", details)


class AuthenticationError(MediRecordsException):
    """Raised when there's an authentication error."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "AUTH_ERROR", details)
