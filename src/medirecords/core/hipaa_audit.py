"""
HIPAA-compliant audit logging system
Captures every patient profile view with immutable logs stored for 6 years
"""

import hashlib
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient

from ..application.ports.services.audit_logger import AuditLogger
from ..domain.entities.audit_entry import AuditEntry
from .exceptions import AuditStoreError

logger = logging.getLogger(__name__)
audit_echo_logger = logging.getLogger("medirecords.audit")


class HIPAAAuditLogger(AuditLogger):
    """
    HIPAA audit logger with immutable logs and 6-year retention
    Logs stored in MongoDB; write-only from the application's point of view
    """

    def __init__(self, collection: Any = None, retention_days: int = 2190):
        self.client: Optional[AsyncIOMotorClient] = None
        self.audit_collection = collection
        self.retention_days = retention_days
        self._initialized = collection is not None

    async def initialize(self, mongo_uri: str, db_name: str, collection_name: str = "patient_audit_logs"):
        """Initialize audit logging collection with proper indexes"""
        try:
            options: Dict[str, Any] = {
                "retryWrites": True,
                "w": "majority",  # Write concern for durability
                "journal": True,  # Ensure writes are journaled
            }
            # Enable TLS only for Atlas SRV URIs
            if mongo_uri.startswith("mongodb+srv://"):
                import certifi

                options.update(tls=True, tlsCAFile=certifi.where())

            self.client = AsyncIOMotorClient(mongo_uri, **options)
            self.audit_collection = self.client[db_name][collection_name]

            await self._create_indexes()

            self._initialized = True
            logger.info(f"✅ HIPAA Audit Logger initialized with {self.retention_days}-day retention")
        except Exception as e:
            logger.error(f"❌ Failed to initialize HIPAA Audit Logger: {e}")
            raise

    async def _create_indexes(self):
        """Create indexes for the audit collection"""
        await self.audit_collection.create_index("audit_id", unique=True)
        await self.audit_collection.create_index("user_id")
        await self.audit_collection.create_index("patient_id")
        await self.audit_collection.create_index("action")
        await self.audit_collection.create_index([("timestamp", -1)])
        await self.audit_collection.create_index([("user_id", 1), ("timestamp", -1)])

        logger.info("✅ Audit log indexes created")

    async def record(self, entry: AuditEntry) -> str:
        """
        Append one audit entry.

        Args:
            entry: The access event to persist

        Returns:
            str: Audit log ID

        Raises:
            AuditStoreError: If the logger is not initialized or the write fails
        """
        if not self._initialized:
            raise AuditStoreError("Audit logger is not initialized")

        audit_entry = self.build_document(entry)

        try:
            await self.audit_collection.insert_one(audit_entry)
        except Exception as e:
            logger.error(f"❌ Failed to write HIPAA audit log: {e}")
            raise AuditStoreError(
                "Failed to write audit entry", {"audit_id": audit_entry["audit_id"]}
            ) from e

        audit_id = audit_entry["audit_id"]
        # Operational echo only; no PHI beyond ids
        audit_echo_logger.info(
            f"HIPAA_AUDIT: audit_id={audit_id} user={entry.actor_id} action={entry.action.value} "
            f"patient={entry.subject_record_id}"
        )
        return audit_id

    def build_document(self, entry: AuditEntry) -> Dict[str, Any]:
        """Build the stored form of ``entry`` with retention and checksum fields."""
        timestamp = entry.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        written_at = datetime.now(timezone.utc)

        audit_entry = {
            "audit_id": str(ObjectId()),
            **entry.to_document(),
            "resource_type": "patient",
            "timestamp": timestamp.isoformat(),  # Store as ISO string
            "retention_date": (written_at + timedelta(days=self.retention_days)).isoformat(),
            "created_at": written_at.isoformat(),
            "immutable": True,
            "checksum": None,  # Will be added below
        }

        # Calculate checksum for integrity verification
        audit_entry["checksum"] = self._calculate_checksum(audit_entry)
        return audit_entry

    @staticmethod
    def _calculate_checksum(entry: dict) -> str:
        """Calculate SHA-256 checksum for integrity verification"""
        # Remove MongoDB-added fields and checksum itself
        excluded_fields = {"checksum", "_id"}
        entry_copy = {k: v for k, v in entry.items() if k not in excluded_fields}

        entry_json = json.dumps(entry_copy, sort_keys=True, default=str)
        return hashlib.sha256(entry_json.encode()).hexdigest()

    async def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
        self._initialized = False


# Global instance
_audit_logger: Optional[HIPAAAuditLogger] = None


def get_audit_logger() -> HIPAAAuditLogger:
    """Get global audit logger instance"""
    global _audit_logger
    if _audit_logger is None:
        from .config import get_settings

        _audit_logger = HIPAAAuditLogger(retention_days=get_settings().audit.retention_days)
    return _audit_logger
