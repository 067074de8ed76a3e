from typing import Optional
from pydantic import BaseModel

from app.schemas.user import UserResponse


class Token(BaseModel):
    """Token response schema."""
    access_token: str
    token_type: str = "bearer"


class LoginResponse(Token):
    """Token plus the profile of the user who logged in."""
    user: UserResponse


class TokenData(BaseModel):
    """Token payload data schema."""
    user_id: Optional[int] = None
    role: Optional[str] = None
