"""
Authentication API endpoints.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.deps import get_user_repo
from app.core.security import verify_password, create_access_token
from app.repositories.user_repo import UserRepository
from app.schemas.auth import LoginRequest
from app.schemas.token import LoginResponse
from app.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    user_repo: UserRepository = Depends(get_user_repo),
):
    """Authenticate by email and password; returns a bearer token and the profile."""
    user = await user_repo.get_by_email(login_data.email)

    if (
        not user
        or not user.is_active
        or not user.hashed_password
        or not verify_password(login_data.password, user.hashed_password)
    ):
        logger.warning(f"Failed login for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await user_repo.record_login(user)

    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    logger.info(f"User {user.id} logged in")
    return LoginResponse(access_token=token, user=UserResponse.model_validate(user))
