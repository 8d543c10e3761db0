"""
MongoDB implementation of PatientRecordRepository.
"""

import logging
from typing import Any, Dict, Optional

from medirecords.application.ports.repositories.patient_record_repo import PatientRecordRepository
from medirecords.core.exceptions import RepositoryError
from medirecords.core.utils.datetime_utils import parse_date
from medirecords.domain.entities.patient_record import PatientRecord
from medirecords.domain.value_objects.record_id import RecordId

from ..models.patient_record_m import PatientRecordMongo

logger = logging.getLogger(__name__)

# Beanie bookkeeping fields that are not part of the profile
_INTERNAL_FIELDS = {"id", "_id", "revision_id", "patient_id"}


class MongoPatientRecordRepository(PatientRecordRepository):
    """MongoDB implementation of PatientRecordRepository."""

    async def find_by_id(self, record_id: RecordId) -> Optional[PatientRecord]:
        """Find a patient record by ID."""
        try:
            patient_mongo = await PatientRecordMongo.find_one({"patient_id": record_id.value})
        except Exception as e:
            logger.error(f"Patient record lookup failed for {record_id.value}: {type(e).__name__}: {e}")
            raise RepositoryError(
                "Failed to fetch patient record", {"record_id": record_id.value}
            ) from e

        if not patient_mongo:
            return None

        return self._mongo_to_domain(patient_mongo.model_dump())

    @staticmethod
    def _mongo_to_domain(document: Dict[str, Any]) -> PatientRecord:
        """Convert a stored document to the domain entity, rejecting malformed ones."""
        record_id = document.get("patient_id")
        try:
            raw_dob = document.get("dob")
            return PatientRecord(
                id=RecordId(record_id),
                name=document.get("name"),
                dob=parse_date(raw_dob) if raw_dob else None,
                extra={
                    k: v
                    for k, v in document.items()
                    if k not in _INTERNAL_FIELDS and k not in ("name", "dob", "age")
                },
            )
        except ValueError as e:
            logger.error(f"Malformed patient document {record_id}: {e}")
            raise RepositoryError(
                "Stored patient record is malformed", {"record_id": record_id, "cause": str(e)}
            ) from e
