from pydantic import BaseModel, field_validator


class LoginRequest(BaseModel):
    """Schema for login request."""
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v
