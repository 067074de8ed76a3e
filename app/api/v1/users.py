"""
Team members. Anyone signed in can list them; only admins add them.
"""
from fastapi import APIRouter, Depends
from starlette import status

from app.api.errors import ErrorCode, raise_api_error
from app.core.deps import get_user_repo
from app.core.security import get_current_user, require_role, get_password_hash
from app.models.user import User, UserRole
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserResponse, UserCreate

router = APIRouter()


@router.get("", response_model=list[UserResponse], dependencies=[Depends(get_current_user)])
async def list_users(repo: UserRepository = Depends(get_user_repo)):
    """Team members, used by the assignee picker."""
    return await repo.get_all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    repo: UserRepository = Depends(get_user_repo),
):
    """Add a team member. Admin only."""
    if await repo.get_by_email(data.email):
        raise_api_error(
            status_code=400,
            code=ErrorCode.DUPLICATE_USER,
            message="User with this email already exists",
            context={"email": data.email},
        )

    user = User(
        name=data.name,
        email=data.email,
        role=data.role,
        hashed_password=get_password_hash(data.password) if data.password else None,
        is_active=True,
    )
    return await repo.create(user)
