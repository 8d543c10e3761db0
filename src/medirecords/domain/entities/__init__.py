"""
Domain entities package.
"""

from .audit_entry import AuditEntry
from .patient_record import PatientRecord

__all__ = [
    "AuditEntry",
    "PatientRecord",
]
