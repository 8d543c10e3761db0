"""
Record access use case tests: ordering, audit guarantees and failure mapping.
"""

import asyncio
import logging

import pytest

from medirecords.application.dto.record_dto import RequestContext
from medirecords.core.exceptions import RepositoryError
from medirecords.domain.enums.access import AuditAction, AuditPolicy
from medirecords.domain.errors import (
    AuditWriteFailedError,
    BadRequestError,
    InternalServiceError,
    RecordNotFoundError,
    UnauthenticatedError,
)

from conftest import (
    FIXED_NOW,
    VALID_USER,
    BlockingAuditLogger,
    FakeAuthGate,
    InMemoryPatientRecordRepository,
    RecordingAuditLogger,
)


@pytest.mark.asyncio
async def test_successful_view_returns_enriched_record(make_use_case, context):
    result = await make_use_case().execute(context, "pat-001")

    data = result.to_dict()
    assert data["id"] == "pat-001"
    assert data["name"] == "Jane Doe"
    assert data["dob"] == "2000-01-01"
    assert data["email"] == "jane@example.com"
    assert data["religion"] is None
    assert data["age"] == 24


@pytest.mark.asyncio
async def test_successful_view_writes_exactly_one_audit_entry(make_use_case, context, audit_logger):
    await make_use_case().execute(context, "pat-001")

    assert len(audit_logger.entries) == 1
    entry = audit_logger.entries[0]
    assert entry.actor_id == VALID_USER
    assert entry.subject_record_id == "pat-001"
    assert entry.action is AuditAction.VIEW_PROFILE
    assert dict(entry.details) == {"patient_name": "Jane Doe"}
    assert entry.source_address == "10.0.0.7"
    assert entry.user_agent == "pytest-agent"
    assert entry.timestamp == FIXED_NOW


@pytest.mark.asyncio
async def test_audit_written_before_result_is_returned(make_use_case, context, audit_logger):
    written_before_return = []

    class OrderCheckingLogger(RecordingAuditLogger):
        async def record(self, entry):
            audit_id = await super().record(entry)
            written_before_return.append(audit_id)
            return audit_id

    use_case = make_use_case(audit_logger=OrderCheckingLogger())
    result = await use_case.execute(context, "pat-001")

    assert written_before_return == ["audit-1"]
    assert result.age == 24


@pytest.mark.asyncio
async def test_missing_client_info_defaults_to_unknown(make_use_case, audit_logger):
    await make_use_case().execute(RequestContext(api_key="test-key"), "pat-001")

    entry = audit_logger.entries[0]
    assert entry.source_address == "unknown"
    assert entry.user_agent == "unknown"


@pytest.mark.asyncio
async def test_unauthenticated_touches_nothing(make_use_case, repository, audit_logger):
    with pytest.raises(UnauthenticatedError):
        await make_use_case().execute(RequestContext(api_key="wrong"), "pat-001")

    assert repository.lookups == []
    assert audit_logger.entries == []


@pytest.mark.asyncio
async def test_gate_returning_no_identity_is_unauthenticated(make_use_case, context, repository, audit_logger):
    use_case = make_use_case(auth_gate=FakeAuthGate(user_id=None))

    with pytest.raises(UnauthenticatedError):
        await use_case.execute(context, "pat-001")

    assert repository.lookups == []
    assert audit_logger.entries == []


@pytest.mark.asyncio
async def test_unexpected_gate_failure_is_unauthenticated(make_use_case, context, repository):
    class BrokenGate(FakeAuthGate):
        async def authenticate(self, context):
            raise RuntimeError("identity provider down")

    with pytest.raises(UnauthenticatedError):
        await make_use_case(auth_gate=BrokenGate()).execute(context, "pat-001")
    assert repository.lookups == []


@pytest.mark.asyncio
@pytest.mark.parametrize("record_id", ["", "   ", None])
async def test_blank_record_id_is_bad_request(make_use_case, context, repository, record_id):
    with pytest.raises(BadRequestError):
        await make_use_case().execute(context, record_id)
    assert repository.lookups == []


@pytest.mark.asyncio
async def test_authentication_checked_before_validation(make_use_case):
    with pytest.raises(UnauthenticatedError):
        await make_use_case().execute(RequestContext(), "")


@pytest.mark.asyncio
async def test_unknown_record_is_not_found_and_not_audited(make_use_case, context, audit_logger):
    with pytest.raises(RecordNotFoundError) as exc_info:
        await make_use_case().execute(context, "pat-404")

    assert exc_info.value.details == {"record_id": "pat-404"}
    assert audit_logger.entries == []


@pytest.mark.asyncio
async def test_repository_error_maps_to_internal_error(make_use_case, context, audit_logger):
    repository = InMemoryPatientRecordRepository(
        error=RepositoryError("connection refused", {"host": "db-internal:27017"})
    )

    with pytest.raises(InternalServiceError) as exc_info:
        await make_use_case(repository=repository).execute(context, "pat-001")

    assert "db-internal" not in exc_info.value.message
    assert exc_info.value.details == {}
    assert audit_logger.entries == []


@pytest.mark.asyncio
async def test_unexpected_error_is_logged_and_hidden(make_use_case, context, caplog):
    repository = InMemoryPatientRecordRepository(error=KeyError("secret_column"))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(InternalServiceError) as exc_info:
            await make_use_case(repository=repository).execute(context, "pat-001")

    assert "secret_column" not in exc_info.value.message
    assert "secret_column" in caplog.text


@pytest.mark.asyncio
async def test_strict_policy_fails_view_when_audit_write_fails(make_use_case, context):
    use_case = make_use_case(AuditPolicy.STRICT, audit_logger=RecordingAuditLogger(fail=True))

    with pytest.raises(AuditWriteFailedError):
        await use_case.execute(context, "pat-001")


@pytest.mark.asyncio
async def test_best_effort_policy_returns_record_and_logs_fallback(make_use_case, context, caplog):
    use_case = make_use_case(AuditPolicy.BEST_EFFORT, audit_logger=RecordingAuditLogger(fail=True))

    with caplog.at_level(logging.CRITICAL, logger="medirecords.audit.fallback"):
        result = await use_case.execute(context, "pat-001")

    assert result.age == 24
    fallback = [r for r in caplog.records if r.name == "medirecords.audit.fallback"]
    assert len(fallback) == 1
    assert "AUDIT_FALLBACK" in fallback[0].getMessage()
    assert "pat-001" in fallback[0].getMessage()


@pytest.mark.asyncio
async def test_repeated_views_are_not_deduplicated(make_use_case, context, audit_logger):
    use_case = make_use_case()
    first = await use_case.execute(context, "pat-001")
    second = await use_case.execute(context, "pat-001")

    assert first.to_dict() == second.to_dict()
    assert len(audit_logger.entries) == 2
    assert audit_logger.entries[0] == audit_logger.entries[1]
    assert audit_logger.entries[0] is not audit_logger.entries[1]


@pytest.mark.asyncio
async def test_record_without_dob_has_null_age(make_use_case, context):
    from medirecords.domain.entities.patient_record import PatientRecord
    from medirecords.domain.value_objects.record_id import RecordId

    repository = InMemoryPatientRecordRepository([PatientRecord(id=RecordId("pat-002"), name="No Dob")])
    result = await make_use_case(repository=repository).execute(context, "pat-002")

    assert result.age is None
    assert result.to_dict()["dob"] is None


@pytest.mark.asyncio
async def test_cancellation_during_audit_write_is_unaudited(make_use_case, context, caplog):
    blocking = BlockingAuditLogger()
    use_case = make_use_case(AuditPolicy.STRICT, audit_logger=blocking)

    with caplog.at_level(logging.ERROR):
        task = asyncio.create_task(use_case.execute(context, "pat-001"))
        await blocking.started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert "treated as unaudited" in caplog.text


@pytest.mark.asyncio
async def test_concurrent_views_each_write_their_own_entry(make_use_case, context, audit_logger):
    use_case = make_use_case()

    results = await asyncio.gather(*(use_case.execute(context, "pat-001") for _ in range(5)))

    assert len(results) == 5
    assert len(audit_logger.entries) == 5


USE_CASE_LOGGER = "medirecords.application.use_cases.view_patient_record"


@pytest.mark.asyncio
async def test_failed_view_logs_terminal_failed_state(make_use_case, context, caplog):
    with caplog.at_level(logging.DEBUG, logger=USE_CASE_LOGGER):
        with pytest.raises(RecordNotFoundError):
            await make_use_case().execute(context, "missing")

    assert "validated -> failed(RECORD_NOT_FOUND)" in caplog.text
    assert "-> fetched" not in caplog.text


@pytest.mark.asyncio
async def test_unexpected_error_logs_failed_internal_state(make_use_case, context, caplog):
    use_case = make_use_case(repository=InMemoryPatientRecordRepository(error=KeyError("boom")))

    with caplog.at_level(logging.DEBUG, logger=USE_CASE_LOGGER):
        with pytest.raises(InternalServiceError):
            await use_case.execute(context, "pat-001")

    assert "validated -> failed(INTERNAL_ERROR)" in caplog.text


@pytest.mark.asyncio
async def test_audit_entry_keeps_requested_record_id(make_use_case, context, repository, audit_logger):
    await make_use_case().execute(context, "  pat-001 ")

    assert repository.lookups == ["pat-001"]
    assert audit_logger.entries[0].subject_record_id == "  pat-001 "
