"""
Pydantic schemas for the activity timeline.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.sanitization import sanitize_long, sanitize_short
from app.models.activity import ActivityType, ActivityDirection


class ActivityCreate(BaseModel):
    """Schema for logging an activity."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    account_id: Optional[str] = None
    contact_id: Optional[str] = None
    opportunity_id: Optional[str] = None
    type: ActivityType = ActivityType.NOTE
    direction: ActivityDirection = ActivityDirection.OUTBOUND
    subject: Optional[str] = Field(None, max_length=256)
    content: str = Field(..., min_length=1, max_length=5000)
    status: str = Field(default="completed", max_length=32)
    date: Optional[datetime] = None

    @field_validator("type", "direction", mode="before")
    @classmethod
    def lower(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("subject", mode="before")
    @classmethod
    def clean_subject(cls, v):
        return sanitize_short(v) if isinstance(v, str) else v

    @field_validator("content", mode="before")
    @classmethod
    def clean_content(cls, v):
        if isinstance(v, str):
            return sanitize_long(v) or ""
        return v

    @model_validator(mode="after")
    def default_subject(self):
        if not self.subject:
            self.subject = f"{self.direction.value} {self.type.value}"
        return self


class ActivityResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    account_id: Optional[str] = None
    contact_id: Optional[str] = None
    opportunity_id: Optional[str] = None
    type: ActivityType
    direction: ActivityDirection
    subject: Optional[str] = None
    content: str
    status: str
    date: datetime
