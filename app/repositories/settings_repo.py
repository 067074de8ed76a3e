from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.app_setting import AppSetting


class SettingsRepository:
    """Key/value access to app_settings."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Optional[dict]:
        result = await self.db.execute(select(AppSetting).where(AppSetting.key == key))
        row = result.scalar_one_or_none()
        return row.value if row else None

    async def put(self, key: str, value: dict) -> None:
        """Insert or overwrite the value stored under `key`."""
        result = await self.db.execute(select(AppSetting).where(AppSetting.key == key))
        row = result.scalar_one_or_none()
        if row is None:
            self.db.add(AppSetting(key=key, value=value))
        else:
            row.value = value
        await self.db.flush()
