"""
Shared fixtures: in-memory stand-ins for the record store, the audit trail
and the authentication gate.
"""

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

import pytest

from medirecords.application.dto.record_dto import RequestContext
from medirecords.application.ports.repositories.patient_record_repo import PatientRecordRepository
from medirecords.application.ports.services.audit_logger import AuditLogger
from medirecords.application.ports.services.auth_gate import AuthGate
from medirecords.application.use_cases.view_patient_record import ViewPatientRecordUseCase
from medirecords.core.exceptions import AuditStoreError, AuthenticationError
from medirecords.domain.entities.audit_entry import AuditEntry
from medirecords.domain.entities.patient_record import PatientRecord
from medirecords.domain.enums.access import AuditPolicy
from medirecords.domain.value_objects.identity import Identity
from medirecords.domain.value_objects.record_id import RecordId

FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
VALID_KEY = "test-key"
VALID_USER = "dr.house@medifly.ai"


class FakeAuthGate(AuthGate):
    """Accepts a single API key."""

    def __init__(self, api_key: str = VALID_KEY, user_id: Optional[str] = VALID_USER):
        self.api_key = api_key
        self.user_id = user_id
        self.calls = 0

    async def authenticate(self, context: RequestContext) -> Optional[Identity]:
        self.calls += 1
        if context.api_key != self.api_key:
            raise AuthenticationError("Invalid API key or token")
        if self.user_id is None:
            return None
        return Identity(self.user_id)


class InMemoryPatientRecordRepository(PatientRecordRepository):
    def __init__(self, records: Optional[List[PatientRecord]] = None, error: Optional[Exception] = None):
        self.records: Dict[str, PatientRecord] = {r.id.value: r for r in records or []}
        self.error = error
        self.lookups: List[str] = []

    async def find_by_id(self, record_id: RecordId) -> Optional[PatientRecord]:
        self.lookups.append(record_id.value)
        if self.error is not None:
            raise self.error
        return self.records.get(record_id.value)


class RecordingAuditLogger(AuditLogger):
    def __init__(self, fail: bool = False):
        self.entries: List[AuditEntry] = []
        self.fail = fail

    async def record(self, entry: AuditEntry) -> str:
        if self.fail:
            raise AuditStoreError("audit store unavailable")
        self.entries.append(entry)
        return f"audit-{len(self.entries)}"


class BlockingAuditLogger(AuditLogger):
    """Never acknowledges; used to cancel a view mid-write."""

    def __init__(self):
        self.started = asyncio.Event()

    async def record(self, entry: AuditEntry) -> str:
        self.started.set()
        await asyncio.Event().wait()
        return "never"


@pytest.fixture
def patient_record() -> PatientRecord:
    return PatientRecord(
        id=RecordId("pat-001"),
        name="Jane Doe",
        dob=date(2000, 1, 1),
        extra={
            "email": "jane@example.com",
            "address": "1 Main St",
            "gender": "female",
            "religion": None,
        },
    )


@pytest.fixture
def auth_gate() -> FakeAuthGate:
    return FakeAuthGate()


@pytest.fixture
def repository(patient_record) -> InMemoryPatientRecordRepository:
    return InMemoryPatientRecordRepository([patient_record])


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def context() -> RequestContext:
    return RequestContext(
        api_key=VALID_KEY,
        source_address="10.0.0.7",
        user_agent="pytest-agent",
        request_id="req-1",
    )


@pytest.fixture
def make_use_case(auth_gate, repository, audit_logger):
    def _make(policy: AuditPolicy = AuditPolicy.STRICT, **overrides) -> ViewPatientRecordUseCase:
        return ViewPatientRecordUseCase(
            auth_gate=overrides.get("auth_gate", auth_gate),
            patient_record_repository=overrides.get("repository", repository),
            audit_logger=overrides.get("audit_logger", audit_logger),
            audit_policy=policy,
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture(autouse=True)
def _propagate_app_logs():
    """Keep ``medirecords`` logs visible to caplog even if logging was configured."""
    app_logger = logging.getLogger("medirecords")
    propagate, handlers, level = app_logger.propagate, list(app_logger.handlers), app_logger.level
    app_logger.propagate = True
    yield
    app_logger.propagate = propagate
    app_logger.handlers = handlers
    app_logger.setLevel(level)
