"""
Patient record repository interface for data access abstraction.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ....domain.entities.patient_record import PatientRecord
from ....domain.value_objects.record_id import RecordId


class PatientRecordRepository(ABC):
    """Abstract read-only repository over the patient record store."""

    @abstractmethod
    async def find_by_id(self, record_id: RecordId) -> Optional[PatientRecord]:
        """Find a patient record by ID.

        Returns ``None`` when no record exists. Raises ``RepositoryError`` when
        the store fails or returns a document that is not a valid record.
        """
        pass
