"""
Pydantic schemas for the AI advisory endpoints.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.deal import Deal


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProspectInput(_CamelModel):
    """What the prospecting form knows about a company."""
    company_name: str = Field(..., min_length=1, max_length=256)
    industry: str = Field(default="Other", max_length=64)
    observations: str = Field(default="", max_length=5000)


class AnalysisResponse(BaseModel):
    analysis: str


class ChatTurn(BaseModel):
    role: Literal["user", "model"]
    text: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=5000)
    history: list[ChatTurn] = Field(default_factory=list)


class ChatReply(BaseModel):
    text: str


class OutreachEmailRequest(_CamelModel):
    company_name: str = Field(..., min_length=1, max_length=256)
    pain_points: list[str] = Field(default_factory=list)
    stage: str = "PROSPECT"


class OutreachEmailResponse(BaseModel):
    email: str


class MorningBriefRequest(BaseModel):
    # When omitted the gateway briefs on the stored pipeline
    deals: Optional[list[Deal]] = None


class MorningBrief(_CamelModel):
    summary: str
    action_items: list[str] = Field(default_factory=list)
    risks: list[str] = Field(default_factory=list)
