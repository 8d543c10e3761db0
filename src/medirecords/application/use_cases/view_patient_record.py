"""View Patient Record use case: authenticated, audited profile lookup.

Every successful view writes exactly one audit entry before the record is
handed back. Steps run strictly in order and are never retried here.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Callable, Optional

from ...core.exceptions import RepositoryError
from ...core.utils.datetime_utils import compute_age, get_current_timestamp
from ...domain.entities.audit_entry import AuditEntry
from ...domain.entities.patient_record import PatientRecord
from ...domain.enums.access import AuditPolicy, ViewState
from ...domain.errors import (
    AuditWriteFailedError,
    BadRequestError,
    DomainError,
    InternalServiceError,
    RecordNotFoundError,
    UnauthenticatedError,
)
from ...domain.value_objects.identity import Identity
from ...domain.value_objects.record_id import RecordId
from ..dto.record_dto import EnrichedRecord, RequestContext
from ..ports.repositories.patient_record_repo import PatientRecordRepository
from ..ports.services.audit_logger import AuditLogger
from ..ports.services.auth_gate import AuthGate

logger = logging.getLogger(__name__)
fallback_logger = logging.getLogger("medirecords.audit.fallback")


class ViewPatientRecordUseCase:
    """Use case for viewing a single patient profile."""

    def __init__(
        self,
        auth_gate: AuthGate,
        patient_record_repository: PatientRecordRepository,
        audit_logger: AuditLogger,
        audit_policy: AuditPolicy = AuditPolicy.STRICT,
        clock: Callable[[], datetime] = get_current_timestamp,
    ):
        self._auth_gate = auth_gate
        self._patient_record_repository = patient_record_repository
        self._audit_logger = audit_logger
        self._audit_policy = AuditPolicy(audit_policy)
        self._clock = clock

    async def execute(self, context: RequestContext, record_id: Optional[str]) -> EnrichedRecord:
        """Execute the view patient record use case."""
        state = ViewState.STARTED
        request_id = context.request_id or "-"
        try:
            identity = await self._authenticate(context)
            state = self._advance(state, ViewState.AUTHENTICATED, request_id)

            rid = self._validate(record_id)
            state = self._advance(state, ViewState.VALIDATED, request_id)

            record = await self._fetch(rid)
            state = self._advance(state, ViewState.FETCHED, request_id)

            now = self._clock()
            age = compute_age(record.dob, now)

            entry = AuditEntry.for_view(
                actor_id=identity.user_id,
                record_id=record_id,
                patient_name=record.name,
                timestamp=now,
                source_address=context.source_address,
                user_agent=context.user_agent,
            )
            await self._write_audit(entry, request_id)
            state = self._advance(state, ViewState.AUDITED, request_id)

            result = EnrichedRecord(record=record, age=age)
            self._advance(state, ViewState.COMPLETED, request_id)
            return result
        except DomainError as e:
            self._advance(state, ViewState.FAILED, request_id, kind=e.error_code)
            logger.info(
                f"Record view failed: kind={e.error_code} state={state.value} request_id={request_id}"
            )
            raise
        except Exception as e:
            self._advance(state, ViewState.FAILED, request_id, kind="INTERNAL_ERROR")
            logger.error(
                f"Unexpected error viewing record (state={state.value}, request_id={request_id}): {e}",
                exc_info=True,
            )
            raise InternalServiceError() from e

    async def _authenticate(self, context: RequestContext) -> Identity:
        try:
            identity = await self._auth_gate.authenticate(context)
        except Exception as e:
            logger.warning(f"Authentication rejected: {e}")
            raise UnauthenticatedError() from e

        if identity is None or not identity.user_id:
            logger.warning("Authentication yielded no identity")
            raise UnauthenticatedError()
        return identity

    def _validate(self, record_id: Optional[str]) -> RecordId:
        try:
            return RecordId(record_id or "")
        except ValueError as e:
            raise BadRequestError("Record id is required") from e

    async def _fetch(self, record_id: RecordId) -> PatientRecord:
        try:
            record = await self._patient_record_repository.find_by_id(record_id)
        except RepositoryError as e:
            logger.error(f"Record store error for {record_id}: {e.message}", extra={"details": e.details})
            raise InternalServiceError() from e

        if record is None:
            raise RecordNotFoundError(record_id.value)
        return record

    async def _write_audit(self, entry: AuditEntry, request_id: str) -> Optional[str]:
        strict = self._audit_policy is AuditPolicy.STRICT
        try:
            return await self._audit_logger.record(entry)
        except asyncio.CancelledError:
            if strict:
                logger.error(
                    f"View of {entry.subject_record_id} cancelled before audit acknowledgement; "
                    f"treated as unaudited, no data released (request_id={request_id})"
                )
            else:
                logger.warning(
                    f"View of {entry.subject_record_id} cancelled during fire-and-forget audit write "
                    f"(request_id={request_id})"
                )
            raise
        except Exception as e:
            if strict:
                logger.error(f"Audit write failed, rejecting view (request_id={request_id}): {e}", exc_info=True)
                raise AuditWriteFailedError() from e

            fallback_logger.critical(
                f"AUDIT_FALLBACK: {json.dumps(entry.to_document(), default=str)}"
            )
            logger.error(f"Audit write failed, continuing under best-effort policy: {e}")
            return None

    @staticmethod
    def _advance(
        current: ViewState, new: ViewState, request_id: str, kind: Optional[str] = None
    ) -> ViewState:
        target = f"{new.value}({kind})" if kind else new.value
        logger.debug(f"Record view {current.value} -> {target} (request_id={request_id})")
        return new
