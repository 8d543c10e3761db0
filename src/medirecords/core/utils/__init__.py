"""
Utility functions for MediRecords application.
"""

from .datetime_utils import (
    compute_age,
    get_current_timestamp,
    parse_date,
)

__all__ = [
    "compute_age",
    "get_current_timestamp",
    "parse_date",
]
