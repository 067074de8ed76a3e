"""
User Repository - team members and their logins.
"""
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class UserRepository:
    """Repository for User operations. Users are never deleted."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[User]:
        """Team members, newest first."""
        stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Lookup by email; emails are stored lowercased."""
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def record_login(self, user: User) -> User:
        """Stamp last_login with the current time."""
        user.last_login = datetime.now(UTC)
        await self.db.flush()
        await self.db.refresh(user)
        return user
