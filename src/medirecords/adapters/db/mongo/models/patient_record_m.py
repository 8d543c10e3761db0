"""MongoDB Beanie model for patient profile documents.

The profile schema is owned by the record store; unknown fields are kept so
they can be passed through to callers.
"""

from typing import Optional

from beanie import Document
from pydantic import ConfigDict, Field
from pymongo import ASCENDING, IndexModel


class PatientRecordMongo(Document):
    """MongoDB model for a patient profile."""

    model_config = ConfigDict(extra="allow")

    patient_id: str = Field(..., description="Patient record ID")
    name: str = Field(..., description="Patient display name")
    # Stored as a YYYY-MM-DD string by the profile writers; BSON dates are rejected here
    dob: Optional[str] = Field(None, description="Date of birth (YYYY-MM-DD)")
    email: Optional[str] = Field(None, description="Email address")
    address: Optional[str] = Field(None, description="Postal address")
    gender: Optional[str] = Field(None, description="Gender")
    religion: Optional[str] = Field(None, description="Religion")
    created_by: Optional[str] = Field(None, description="User who created the profile")
    created_date: Optional[str] = Field(None, description="Creation date")
    user_log: Optional[str] = Field(None, description="Last editing user")
    date_log: Optional[str] = Field(None, description="Last edit date")

    class Settings:
        name = "patients"
        indexes = [
            IndexModel([("patient_id", ASCENDING)], unique=True),
            "name",
        ]


def bind_collection(collection_name: str) -> None:
    """Point the model at ``collection_name``; call before ``init_beanie``."""
    PatientRecordMongo.Settings.name = collection_name
