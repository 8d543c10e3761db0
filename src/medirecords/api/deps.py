"""FastAPI dependency providers."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from ..adapters.db.mongo.repositories.patient_record_repository import (
    MongoPatientRecordRepository,
)
from ..application.dto.record_dto import RequestContext
from ..application.ports.repositories.patient_record_repo import PatientRecordRepository
from ..application.ports.services.audit_logger import AuditLogger
from ..application.ports.services.auth_gate import AuthGate
from ..application.use_cases.view_patient_record import ViewPatientRecordUseCase
from ..core.auth import get_auth_service
from ..core.config import get_settings
from ..core.hipaa_audit import get_audit_logger
from ..domain.enums.access import AuditPolicy


@lru_cache()
def get_patient_record_repository() -> PatientRecordRepository:
    """Get patient record repository instance."""
    return MongoPatientRecordRepository()


def get_auth_gate() -> AuthGate:
    """Get the authentication gate (API key service singleton)."""
    return get_auth_service()


def get_hipaa_audit_logger() -> AuditLogger:
    """Get the audit trail writer (singleton, initialized at startup)."""
    return get_audit_logger()


def get_view_record_use_case(
    auth_gate: Annotated[AuthGate, Depends(get_auth_gate)],
    repository: Annotated[PatientRecordRepository, Depends(get_patient_record_repository)],
    audit_logger: Annotated[AuditLogger, Depends(get_hipaa_audit_logger)],
) -> ViewPatientRecordUseCase:
    """Assemble the view use case from its collaborators."""
    return ViewPatientRecordUseCase(
        auth_gate=auth_gate,
        patient_record_repository=repository,
        audit_logger=audit_logger,
        audit_policy=AuditPolicy(get_settings().audit.policy),
    )


def get_request_context(request: Request) -> RequestContext:
    """Lift credentials and client info off the HTTP request."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        source_address = forwarded.split(",")[0].strip()
    else:
        source_address = request.client.host if request.client else None

    return RequestContext(
        api_key=request.headers.get("x-api-key"),
        authorization=request.headers.get("authorization"),
        source_address=source_address,
        user_agent=request.headers.get("user-agent"),
        request_id=getattr(request.state, "request_id", None),
    )


# Dependency annotations for FastAPI
ViewRecordUseCaseDep = Annotated[ViewPatientRecordUseCase, Depends(get_view_record_use_case)]
RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]
