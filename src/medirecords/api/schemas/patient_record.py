"""Patient record response schema."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...application.dto.record_dto import EnrichedRecord


class PatientRecordResponse(BaseModel):
    """All stored profile fields plus the derived age."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Patient record ID")
    name: str = Field(..., description="Patient display name")
    dob: Optional[str] = Field(None, description="Date of birth (YYYY-MM-DD)")
    age: Optional[int] = Field(None, description="Age in years derived from dob at view time")

    @classmethod
    def from_enriched(cls, enriched: EnrichedRecord) -> "PatientRecordResponse":
        return cls(**enriched.to_dict())
