"""
Activity timeline: calls, emails, meetings and notes logged against an
account, contact or opportunity.
"""
from datetime import datetime, UTC
from typing import Optional

from fastapi import APIRouter, Depends, Query
from starlette import status

from app.core.deps import get_activity_repo
from app.core.security import get_current_user
from app.models.activity import Activity
from app.repositories.activity_repo import ActivityRepository
from app.schemas.activity import ActivityCreate, ActivityResponse

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[ActivityResponse])
async def list_activities(
    account_id: Optional[str] = Query(default=None, alias="accountId"),
    contact_id: Optional[str] = Query(default=None, alias="contactId"),
    opportunity_id: Optional[str] = Query(default=None, alias="opportunityId"),
    repo: ActivityRepository = Depends(get_activity_repo),
):
    """Timeline for an account, contact or opportunity, newest first."""
    return await repo.get_for_context(
        account_id=account_id,
        contact_id=contact_id,
        opportunity_id=opportunity_id,
    )


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    data: ActivityCreate,
    repo: ActivityRepository = Depends(get_activity_repo),
):
    activity = Activity(
        account_id=data.account_id,
        contact_id=data.contact_id,
        opportunity_id=data.opportunity_id,
        type=data.type,
        direction=data.direction,
        subject=data.subject,
        content=data.content,
        status=data.status,
        date=data.date or datetime.now(UTC),
    )
    return await repo.create(activity)
