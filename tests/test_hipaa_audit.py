"""
HIPAA audit logger tests against a fake Motor collection.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from medirecords.core.exceptions import AuditStoreError
from medirecords.core.hipaa_audit import HIPAAAuditLogger
from medirecords.domain.entities.audit_entry import AuditEntry


class FakeCollection:
    def __init__(self, error: Exception = None):
        self.documents = []
        self.error = error

    async def insert_one(self, document):
        if self.error is not None:
            raise self.error
        self.documents.append(dict(document))
        return object()


def _entry() -> AuditEntry:
    return AuditEntry.for_view(
        actor_id="user-1",
        record_id="pat-001",
        patient_name="Jane Doe",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        source_address="10.0.0.7",
        user_agent=None,
    )


@pytest.mark.asyncio
async def test_record_appends_one_document():
    collection = FakeCollection()
    audit_logger = HIPAAAuditLogger(collection=collection)

    audit_id = await audit_logger.record(_entry())

    assert len(collection.documents) == 1
    doc = collection.documents[0]
    assert doc["audit_id"] == audit_id
    assert doc["user_id"] == "user-1"
    assert doc["action"] == "view_profile"
    assert doc["patient_id"] == "pat-001"
    assert doc["details"] == {"patient_name": "Jane Doe"}
    assert doc["ip_address"] == "10.0.0.7"
    assert doc["user_agent"] == "unknown"
    assert doc["timestamp"] == "2024-01-01T00:00:00+00:00"
    assert doc["immutable"] is True


@pytest.mark.asyncio
async def test_checksum_covers_entry_contents():
    collection = FakeCollection()
    audit_logger = HIPAAAuditLogger(collection=collection)
    await audit_logger.record(_entry())

    doc = collection.documents[0]
    assert doc["checksum"] == HIPAAAuditLogger._calculate_checksum(doc)

    tampered = dict(doc, user_id="someone-else")
    assert HIPAAAuditLogger._calculate_checksum(tampered) != doc["checksum"]


def test_retention_date_follows_configuration():
    audit_logger = HIPAAAuditLogger(collection=FakeCollection(), retention_days=10)

    doc = audit_logger.build_document(_entry())

    created = datetime.fromisoformat(doc["created_at"])
    retention = datetime.fromisoformat(doc["retention_date"])
    assert retention - created == timedelta(days=10)


@pytest.mark.asyncio
async def test_store_failure_raises_audit_store_error():
    audit_logger = HIPAAAuditLogger(collection=FakeCollection(error=ConnectionError("no primary")))

    with pytest.raises(AuditStoreError):
        await audit_logger.record(_entry())


@pytest.mark.asyncio
async def test_uninitialized_logger_refuses_to_pretend():
    with pytest.raises(AuditStoreError):
        await HIPAAAuditLogger().record(_entry())


def test_audit_entry_is_immutable():
    entry = _entry()

    with pytest.raises(FrozenInstanceError):
        entry.actor_id = "other"
    with pytest.raises(TypeError):
        entry.details["patient_name"] = "changed"


def test_audit_entry_requires_actor_and_subject():
    with pytest.raises(ValueError):
        AuditEntry.for_view("", "pat-001", "Jane", datetime.now(timezone.utc))
    with pytest.raises(ValueError):
        AuditEntry.for_view("user-1", "", "Jane", datetime.now(timezone.utc))
