"""
Activity model: calls, emails, meetings and notes logged against an
account, contact or opportunity.
"""
import enum
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import Integer, String, DateTime, ForeignKey, Text, Index, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from app.core.base import Base


class ActivityType(str, enum.Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"


class ActivityDirection(str, enum.Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Activity(Base):
    """Timeline entry. Any combination of the three context links may be set."""

    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    account_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True
    )
    contact_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("contacts.id", ondelete="CASCADE"), nullable=True
    )
    opportunity_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("opportunities.id", ondelete="CASCADE"), nullable=True
    )

    type: Mapped[ActivityType] = mapped_column(SAEnum(ActivityType), nullable=False)
    direction: Mapped[ActivityDirection] = mapped_column(
        SAEnum(ActivityDirection), nullable=False, default=ActivityDirection.OUTBOUND
    )
    subject: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="completed")
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    __table_args__ = (
        Index("ix_activities_account_date", "account_id", "date"),
        Index("ix_activities_contact_date", "contact_id", "date"),
        Index("ix_activities_opportunity_date", "opportunity_id", "date"),
    )

    def __repr__(self):
        return f"<Activity id={self.id} type={self.type.value} opportunity_id={self.opportunity_id}>"
