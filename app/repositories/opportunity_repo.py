"""
Opportunity Repository - Data Access Layer for Opportunity model.
"""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.opportunity import Opportunity
from app.models.user import User


class OpportunityRepository:
    """Repository for Opportunity CRUD operations. There is no delete."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_with_assignee_name(self) -> list[tuple[Opportunity, Optional[str]]]:
        """All opportunities, newest first, each paired with its assignee's name."""
        stmt = (
            select(Opportunity, User.name)
            .outerjoin(User, Opportunity.assigned_to == User.id)
            .order_by(Opportunity.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return [(row[0], row[1]) for row in result.all()]

    async def get_by_id(self, opportunity_id: str) -> Optional[Opportunity]:
        result = await self.db.execute(
            select(Opportunity).where(Opportunity.id == opportunity_id)
        )
        return result.scalar_one_or_none()

    async def get_many(self, ids: list[str]) -> dict[str, Opportunity]:
        """Existing opportunities among `ids`, keyed by id."""
        if not ids:
            return {}
        result = await self.db.execute(
            select(Opportunity).where(Opportunity.id.in_(ids))
        )
        return {opp.id: opp for opp in result.scalars().all()}

    async def create(self, opportunity: Opportunity) -> Opportunity:
        """Insert a new opportunity."""
        self.db.add(opportunity)
        await self.db.flush()
        return opportunity

    async def save(self) -> None:
        """Flush pending changes."""
        await self.db.flush()
