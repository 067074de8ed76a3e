"""
Account and Contact repositories.
"""
from typing import Optional

from sqlalchemy import select, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account, Contact


class AccountRepository:
    """Repository for Account operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, query: Optional[str] = None) -> list[Account]:
        """Accounts ordered by name, optionally filtered by name or industry substring."""
        stmt = select(Account)
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Account.name).like(pattern),
                    func.lower(Account.industry).like(pattern),
                )
            )
        result = await self.db.execute(stmt.order_by(Account.name))
        return list(result.scalars().all())

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        result = await self.db.execute(select(Account).where(Account.id == account_id))
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.db.add(account)
        await self.db.flush()
        await self.db.refresh(account)
        return account


class ContactRepository:
    """Repository for Contact operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, account_id: Optional[str] = None) -> list[Contact]:
        stmt = select(Contact)
        if account_id:
            stmt = stmt.where(Contact.account_id == account_id)
        result = await self.db.execute(stmt.order_by(Contact.name))
        return list(result.scalars().all())

    async def create(self, contact: Contact) -> Contact:
        self.db.add(contact)
        await self.db.flush()
        await self.db.refresh(contact)
        return contact
