"""
Opportunity (deal) endpoints: full list, bulk upsert, single insert.

There is deliberately no DELETE: a bulk upsert never removes rows that are
missing from the submitted list.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from starlette import status

from app.api.errors import ErrorCode, raise_api_error
from app.core.deps import get_opportunity_service
from app.core.security import get_current_user
from app.schemas.deal import Deal, SyncResponse
from app.services.opportunity_service import OpportunityService, DuplicateRecordError

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[Deal], response_model_by_alias=True)
async def list_opportunities(
    svc: OpportunityService = Depends(get_opportunity_service),
):
    """All deals with assignee names. Never errors on a store failure; returns []."""
    return await svc.list_deals()


@router.put("", response_model=SyncResponse)
async def bulk_upsert_opportunities(
    deals: list[Deal],
    svc: OpportunityService = Depends(get_opportunity_service),
):
    """Insert-or-update every submitted deal in one transaction."""
    try:
        await svc.bulk_upsert(deals)
    except SQLAlchemyError as e:
        logger.error(f"Bulk upsert of {len(deals)} deals failed, batch rolled back: {e}")
        raise_api_error(
            status_code=500,
            code=ErrorCode.BULK_UPSERT_FAILED,
            message="Bulk upsert failed",
            detail=str(e.__class__.__name__),
            context={"records": len(deals)},
        )
    return SyncResponse(success=True)


@router.post("", response_model=Deal, status_code=status.HTTP_201_CREATED)
async def create_opportunity(
    deal: Deal,
    svc: OpportunityService = Depends(get_opportunity_service),
):
    """Insert one deal. An existing id is a conflict, not an update."""
    try:
        return await svc.create_deal(deal)
    except DuplicateRecordError as e:
        raise_api_error(
            status_code=409,
            code=ErrorCode.DUPLICATE_OPPORTUNITY,
            message="Opportunity already exists",
            detail=str(e),
            context={"id": e.record_id},
        )
