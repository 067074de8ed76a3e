"""
AI advisory endpoints. Nothing here writes to the store.
"""
import logging

from fastapi import APIRouter, Depends

from app.ai.ai_service import AIService, AIServiceError
from app.api.errors import ErrorCode, raise_api_error
from app.core.deps import get_ai_service, get_opportunity_service
from app.core.security import get_current_user
from app.schemas.ai import (
    ProspectInput,
    AnalysisResponse,
    ChatRequest,
    ChatReply,
    OutreachEmailRequest,
    OutreachEmailResponse,
    MorningBriefRequest,
    MorningBrief,
)
from app.schemas.deal import LeadScore
from app.services.opportunity_service import OpportunityService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/score", response_model=LeadScore)
async def score_prospect(
    data: ProspectInput,
    ai: AIService = Depends(get_ai_service),
):
    """Four sub-scores plus the weighted composite. Falls back to rules when the model is down."""
    return await ai.score_lead(data.company_name, data.industry, data.observations)


@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_prospect(
    data: ProspectInput,
    ai: AIService = Depends(get_ai_service),
):
    analysis = await ai.deep_analysis(data.company_name, data.industry, data.observations)
    return AnalysisResponse(analysis=analysis)


@router.post("/chat", response_model=ChatReply)
async def chat(
    data: ChatRequest,
    ai: AIService = Depends(get_ai_service),
):
    try:
        return await ai.chat(data.message, data.history)
    except AIServiceError as e:
        raise_api_error(
            status_code=502,
            code=ErrorCode.AI_UNAVAILABLE,
            message="AI assistant is unavailable",
            detail=str(e),
        )


@router.post("/email", response_model=OutreachEmailResponse)
async def draft_email(
    data: OutreachEmailRequest,
    ai: AIService = Depends(get_ai_service),
):
    email = await ai.draft_outreach_email(data.company_name, data.pain_points, data.stage)
    return OutreachEmailResponse(email=email)


@router.post("/brief", response_model=MorningBrief)
async def morning_brief(
    data: MorningBriefRequest,
    ai: AIService = Depends(get_ai_service),
    svc: OpportunityService = Depends(get_opportunity_service),
):
    """Brief on the submitted deals, or on the stored pipeline when none are sent."""
    deals = data.deals if data.deals is not None else await svc.list_deals()
    brief = await ai.morning_brief(deals)
    if brief is None:
        logger.warning(f"Morning brief unavailable for {len(deals)} deals")
        raise_api_error(
            status_code=502,
            code=ErrorCode.BRIEF_UNAVAILABLE,
            message="Could not generate a morning brief",
            context={"deals": len(deals)},
        )
    return brief
