from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.user import UserRole
from app.core.sanitization import sanitize_short


class UserCreate(BaseModel):
    """Schema for adding a team member. Password is optional."""
    name: str = Field(..., min_length=1, max_length=256)
    email: str = Field(..., min_length=3, max_length=256)
    role: UserRole = UserRole.USER
    password: Optional[str] = Field(None, min_length=8, max_length=128)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, v):
        return sanitize_short(v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class UserResponse(BaseModel):
    """Schema for user response."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    email: Optional[str] = None
    role: UserRole
    last_login: Optional[datetime] = Field(default=None, alias="lastLogin")
