"""
Value objects package for domain layer.
"""

from .identity import Identity
from .record_id import RecordId

__all__ = [
    "Identity",
    "RecordId",
]
