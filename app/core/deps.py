"""
FastAPI dependencies for dependency injection.
"""
from typing import Annotated, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.ai.ai_service import AIService
from app.core.database import get_db
from app.repositories.account_repo import AccountRepository, ContactRepository
from app.repositories.activity_repo import ActivityRepository
from app.repositories.opportunity_repo import OpportunityRepository
from app.repositories.settings_repo import SettingsRepository
from app.repositories.user_repo import UserRepository
from app.services.opportunity_service import OpportunityService
from app.services.settings_service import SettingsService


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_opportunity_service(db: DbSession) -> OpportunityService:
    """Get OpportunityService instance."""
    return OpportunityService(OpportunityRepository(db))


async def get_user_repo(db: DbSession) -> UserRepository:
    """Get UserRepository instance."""
    return UserRepository(db)


async def get_account_repo(db: DbSession) -> AccountRepository:
    return AccountRepository(db)


async def get_contact_repo(db: DbSession) -> ContactRepository:
    return ContactRepository(db)


async def get_activity_repo(db: DbSession) -> ActivityRepository:
    return ActivityRepository(db)


async def get_settings_service(db: DbSession) -> SettingsService:
    """Get SettingsService instance."""
    return SettingsService(SettingsRepository(db))


async def get_ai_service(
    settings_service: Annotated[SettingsService, Depends(get_settings_service)],
) -> AsyncGenerator[AIService, None]:
    """AIService using the admin's system instruction when one is configured. Closed after the request."""
    config = await settings_service.get_config()
    ai = AIService(system_instruction=config.system_instruction or None)
    try:
        yield ai
    finally:
        await ai.aclose()
