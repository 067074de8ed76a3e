"""
Pydantic schemas for accounts and contacts.
"""
import json
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.sanitization import sanitize_short, sanitize_labels


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AccountCreate(_CamelModel):
    name: str = Field(..., min_length=1, max_length=256)
    industry: str = Field(default="Other", max_length=64)
    website: Optional[str] = Field(None, max_length=512)
    revenue_range: Optional[str] = Field(None, max_length=64)
    tech_stack: list[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return sanitize_short(v) if isinstance(v, str) else v

    @field_validator("tech_stack", mode="before")
    @classmethod
    def parse_tech_stack(cls, v):
        # Older rows stored the stack as a JSON-encoded string
        if v is None:
            return []
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except ValueError:
                parsed = v.split(",")
            v = parsed if isinstance(parsed, list) else [parsed]
        return sanitize_labels(v) if isinstance(v, list) else v


class AccountResponse(AccountCreate):
    id: str
    created_at: datetime


class ContactCreate(_CamelModel):
    account_id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=256)
    email: Optional[str] = Field(None, max_length=256)
    phone: Optional[str] = Field(None, max_length=64)
    title: Optional[str] = Field(None, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return sanitize_short(v) if isinstance(v, str) else v


class ContactResponse(ContactCreate):
    id: str
    created_at: datetime
