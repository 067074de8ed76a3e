"""
SettingsService: admin settings with built-in defaults.
"""
import logging

from pydantic import ValidationError

from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings import AppConfig

logger = logging.getLogger(__name__)

SETTINGS_KEY = "settings"


class SettingsService:
    def __init__(self, repo: SettingsRepository):
        self.repo = repo

    async def get_config(self) -> AppConfig:
        """Stored settings, or defaults when nothing usable is stored."""
        stored = await self.repo.get(SETTINGS_KEY)
        if not stored:
            return AppConfig()
        try:
            return AppConfig.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"Stored settings are invalid, using defaults: {e}")
            return AppConfig()

    async def save_config(self, config: AppConfig) -> None:
        await self.repo.put(SETTINGS_KEY, config.model_dump(by_alias=True))
        logger.info(f"Settings saved ({len(config.industries)} industries)")
