"""
Audit logger interface (append-only audit trail).
"""

from abc import ABC, abstractmethod

from ....domain.entities.audit_entry import AuditEntry


class AuditLogger(ABC):
    """Abstract writer for the compliance audit trail."""

    @abstractmethod
    async def record(self, entry: AuditEntry) -> str:
        """Durably append ``entry`` and return its audit id.

        Raises ``AuditStoreError`` if the entry could not be written.
        """
        pass
