"""Data Transfer Objects for record access."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...domain.entities.patient_record import PatientRecord


@dataclass(frozen=True)
class RequestContext:
    """Caller-supplied data the use case needs, lifted off the transport."""

    api_key: Optional[str] = None
    authorization: Optional[str] = None
    source_address: Optional[str] = None
    user_agent: Optional[str] = None
    request_id: Optional[str] = None


@dataclass(frozen=True)
class EnrichedRecord:
    """Patient record plus the derived age. Built per request, never stored."""

    record: PatientRecord
    age: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data["age"] = self.age
        return data
