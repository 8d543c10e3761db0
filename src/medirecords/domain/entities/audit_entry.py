"""Audit entry domain entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..enums.access import AuditAction

UNKNOWN = "unknown"


@dataclass(frozen=True)
class AuditEntry:
    """One access event.

    Subject id and name are copied by value so the trail stays meaningful if
    the record is later edited or removed.
    """

    actor_id: str
    action: AuditAction
    subject_record_id: str
    details: Mapping[str, Any]
    timestamp: datetime
    source_address: str = UNKNOWN
    user_agent: str = UNKNOWN

    def __post_init__(self) -> None:
        if not self.actor_id:
            raise ValueError("Audit entry requires an actor id")
        if not self.subject_record_id:
            raise ValueError("Audit entry requires a subject record id")
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))
        object.__setattr__(self, "source_address", self.source_address or UNKNOWN)
        object.__setattr__(self, "user_agent", self.user_agent or UNKNOWN)

    @classmethod
    def for_view(
        cls,
        actor_id: str,
        record_id: str,
        patient_name: str,
        timestamp: datetime,
        source_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> "AuditEntry":
        """Build the entry written for a profile view."""
        return cls(
            actor_id=actor_id,
            action=AuditAction.VIEW_PROFILE,
            subject_record_id=record_id,
            details={"patient_name": patient_name},
            timestamp=timestamp,
            source_address=source_address or UNKNOWN,
            user_agent=user_agent or UNKNOWN,
        )

    def to_document(self) -> Dict[str, Any]:
        """Plain mapping for the audit store."""
        return {
            "user_id": self.actor_id,
            "action": self.action.value,
            "patient_id": self.subject_record_id,
            "details": dict(self.details),
            "ip_address": self.source_address,
            "user_agent": self.user_agent,
            "timestamp": self.timestamp.isoformat(),
        }
