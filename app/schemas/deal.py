"""
Pydantic schemas for deals (opportunities) and the wire/store field mapping.

The JSON exchanged with clients uses camelCase keys; the store uses
snake_case columns. WIRE_TO_COLUMN is the single mapping between the two:
Deal attributes are named after the columns and get their JSON aliases from
this table, and the gateway builds store rows from the same table.
"""
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.opportunity import PipelineStage


WIRE_TO_COLUMN: dict[str, str] = {
    "id": "id",
    "accountId": "account_id",
    "primaryContactId": "primary_contact_id",
    "companyName": "company_name",
    "contactName": "contact_name",
    "email": "email",
    "phone": "phone",
    "website": "website",
    "industry": "industry",
    "revenueRange": "revenue_range",
    "stage": "stage",
    "score": "score",
    "notes": "notes",
    "aiAnalysis": "ai_analysis",
    "lastContact": "last_contact",
    "assignedTo": "assigned_to",
    "createdAt": "created_at",
}

COLUMN_TO_WIRE: dict[str, str] = {column: wire for wire, column in WIRE_TO_COLUMN.items()}

# Read-only fields produced by the gateway's join, never written to the store
JOINED_FIELDS: dict[str, str] = {
    "assigned_to_name": "assignedToName",
}


def wire_alias(field_name: str) -> str:
    """JSON key for a Deal attribute."""
    if field_name in COLUMN_TO_WIRE:
        return COLUMN_TO_WIRE[field_name]
    return JOINED_FIELDS[field_name]


class LeadScore(BaseModel):
    """AI lead score. Sub-scores are 1-10, composite is 0-100."""
    fit: float
    need: float
    timing: float
    readiness: float
    composite: float
    rationale: str = ""


class Deal(BaseModel):
    """A deal as held in memory by the pipeline and exchanged with the gateway."""

    model_config = ConfigDict(alias_generator=wire_alias, populate_by_name=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    account_id: Optional[str] = None
    primary_contact_id: Optional[str] = None

    company_name: str = ""
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    revenue_range: Optional[str] = None

    stage: PipelineStage = PipelineStage.PROSPECT
    score: Optional[LeadScore] = None
    notes: Optional[str] = None
    ai_analysis: Optional[str] = None
    last_contact: Optional[str] = None

    assigned_to: Optional[int] = None
    assigned_to_name: Optional[str] = None

    created_at: Optional[datetime] = None

    @field_validator("stage", mode="before")
    @classmethod
    def coerce_stage(cls, v):
        # The intake form historically posted lowercase stage names
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("assigned_to", mode="before")
    @classmethod
    def coerce_assignee(cls, v):
        # "" is the "Unassigned" option of the assignee picker
        if isinstance(v, str):
            v = v.strip()
            return int(v) if v else None
        return v

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class SyncResponse(BaseModel):
    """Response for bulk and settings writes."""
    success: bool = True
