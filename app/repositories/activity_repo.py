from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.activity import Activity


class ActivityRepository:
    """Repository for timeline activities."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_for_context(
        self,
        account_id: Optional[str] = None,
        contact_id: Optional[str] = None,
        opportunity_id: Optional[str] = None,
    ) -> list[Activity]:
        """Activities matching every given link, newest first."""
        stmt = select(Activity)
        if account_id:
            stmt = stmt.where(Activity.account_id == account_id)
        if contact_id:
            stmt = stmt.where(Activity.contact_id == contact_id)
        if opportunity_id:
            stmt = stmt.where(Activity.opportunity_id == opportunity_id)
        stmt = stmt.order_by(Activity.date.desc(), Activity.id.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create(self, activity: Activity) -> Activity:
        self.db.add(activity)
        await self.db.flush()
        await self.db.refresh(activity)
        return activity
