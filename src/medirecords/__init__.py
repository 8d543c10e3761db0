"""
MediRecords: audited access to patient profiles

Serves single patient-profile lookups behind API-key authentication and
writes an immutable HIPAA audit entry for every successful view.
"""

__version__ = "0.1.0"
__author__ = "MediRecords Team"
__description__ = "Audited patient profile access service"
