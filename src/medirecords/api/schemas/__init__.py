"""
API schemas package.
"""

from .common import ApiResponse, ErrorResponse
from .patient_record import PatientRecordResponse

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "PatientRecordResponse",
]
