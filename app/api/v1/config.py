"""
Admin-editable app configuration: target industries and the AI system
instruction.
"""
from fastapi import APIRouter, Depends

from app.core.deps import get_settings_service
from app.core.security import get_current_user
from app.schemas.deal import SyncResponse
from app.schemas.settings import AppConfig
from app.services.settings_service import SettingsService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=AppConfig, response_model_by_alias=True)
async def get_config(svc: SettingsService = Depends(get_settings_service)):
    """Current settings; defaults when none were saved."""
    return await svc.get_config()


@router.post("", response_model=SyncResponse)
async def save_config(
    config: AppConfig,
    svc: SettingsService = Depends(get_settings_service),
):
    """Replace the stored settings."""
    await svc.save_config(config)
    return SyncResponse(success=True)
