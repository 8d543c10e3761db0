"""
Record ID value object for type-safe patient record identification.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RecordId:
    """Immutable patient record identifier value object."""

    value: str

    def __post_init__(self) -> None:
        """Validate record ID."""
        if not isinstance(self.value, str):
            raise ValueError("Record ID must be a string")

        stripped = self.value.strip()
        if not stripped:
            raise ValueError("Record ID cannot be empty")

        object.__setattr__(self, "value", stripped)

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RecordId):
            return False
        return self.value == other.value

    def __hash__(self) -> int:
        return hash(self.value)
