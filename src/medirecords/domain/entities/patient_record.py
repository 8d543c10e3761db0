"""Patient record domain entity (read copy of a stored patient profile)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional

from ..value_objects.record_id import RecordId

RESERVED_FIELDS = {"id", "name", "dob", "age"}


@dataclass
class PatientRecord:
    """Patient profile as held by the record store.

    Only ``id``, ``name`` and ``dob`` are inspected; everything else the store
    returns is carried in ``extra`` and passed through untouched.
    """

    id: RecordId
    name: str
    dob: Optional[date] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate record shape."""
        if not isinstance(self.id, RecordId):
            raise ValueError("Patient record id must be a RecordId")

        if not isinstance(self.name, str):
            raise ValueError("Patient name must be a string")

        if self.dob is not None and not isinstance(self.dob, date):
            raise ValueError("Patient date of birth must be a date")

        clashing = RESERVED_FIELDS.intersection(self.extra)
        if clashing:
            raise ValueError(f"Extra fields shadow core fields: {sorted(clashing)}")

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to a single mapping of all stored fields."""
        data: Dict[str, Any] = dict(self.extra)
        data["id"] = self.id.value
        data["name"] = self.name
        data["dob"] = self.dob.isoformat() if self.dob else None
        return data
