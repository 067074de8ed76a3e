"""
Opportunity model (a.k.a. deal / prospect) and the pipeline stage rules.
"""
import enum
from typing import TYPE_CHECKING, Optional
from datetime import datetime, UTC

from sqlalchemy import String, Text, DateTime, Enum as SAEnum, ForeignKey, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.base import Base

if TYPE_CHECKING:
    from app.models.user import User


class PipelineStage(str, enum.Enum):
    """Sales pipeline stages."""
    PROSPECT = "PROSPECT"
    OUTREACH = "OUTREACH"
    ENGAGED = "ENGAGED"
    DISCOVERY = "DISCOVERY"
    PROPOSAL = "PROPOSAL"
    NEGOTIATION = "NEGOTIATION"
    CLOSED_WON = "CLOSED_WON"
    CLOSED_LOST = "CLOSED_LOST"


# Forward-advance order used by the pipeline board.
# DISCOVERY is only reachable by editing the deal directly.
ADVANCE_ORDER = [
    PipelineStage.PROSPECT,
    PipelineStage.OUTREACH,
    PipelineStage.ENGAGED,
    PipelineStage.PROPOSAL,
    PipelineStage.NEGOTIATION,
]

CLOSED_STAGES = {PipelineStage.CLOSED_WON, PipelineStage.CLOSED_LOST}

# Sub-score weights of the composite lead score (sum = 10, so 1-10 inputs give 10-100)
SCORE_WEIGHTS = {
    "fit": 2,
    "need": 3,
    "timing": 2,
    "readiness": 3,
}


def next_stage(stage: PipelineStage) -> Optional[PipelineStage]:
    """Stage after `stage` in ADVANCE_ORDER, or None when it cannot advance."""
    if stage not in ADVANCE_ORDER:
        return None
    idx = ADVANCE_ORDER.index(stage)
    if idx == len(ADVANCE_ORDER) - 1:
        return None
    return ADVANCE_ORDER[idx + 1]


def composite_score(fit: float, need: float, timing: float, readiness: float) -> float:
    """Weighted composite on a 0-100 scale."""
    total = (
        fit * SCORE_WEIGHTS["fit"]
        + need * SCORE_WEIGHTS["need"]
        + timing * SCORE_WEIGHTS["timing"]
        + readiness * SCORE_WEIGHTS["readiness"]
    )
    return round(total, 1)


class Opportunity(Base):
    """A deal tracked through the pipeline.

    Contact and company fields are denormalised copies for display; the
    account/contact links are optional.
    """
    __tablename__ = "opportunities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    account_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True
    )
    primary_contact_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True
    )

    company_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")
    contact_name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)
    website: Mapped[str | None] = mapped_column(String(512), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(64), nullable=True)
    revenue_range: Mapped[str | None] = mapped_column(String(64), nullable=True)

    stage: Mapped[PipelineStage] = mapped_column(
        SAEnum(PipelineStage), nullable=False, default=PipelineStage.PROSPECT, index=True
    )

    # {fit, need, timing, readiness, composite, rationale}
    score: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    ai_analysis: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_contact: Mapped[str | None] = mapped_column(String(32), nullable=True)

    assigned_to: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    assignee: Mapped["User | None"] = relationship(
        "User", back_populates="opportunities", foreign_keys=[assigned_to]
    )

    def __repr__(self):
        return f"<Opportunity id={self.id} company={self.company_name} stage={self.stage.value}>"
