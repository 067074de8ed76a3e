"""
Team member model. Users are referenced by opportunities as assignees.
"""
from datetime import datetime, UTC
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Boolean, Integer, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from app.core.base import Base

if TYPE_CHECKING:
    from app.models.opportunity import Opportunity


class UserRole(str, enum.Enum):
    """User roles."""
    ADMIN = "admin"
    USER = "user"


class User(Base):
    """Salesperson or administrator."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(256), unique=True, nullable=True, index=True)
    role: Mapped[UserRole] = mapped_column(SAEnum(UserRole), default=UserRole.USER, nullable=False)
    hashed_password: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    # Non-owning back-reference: deleting a user never deletes deals
    opportunities: Mapped[list["Opportunity"]] = relationship(
        "Opportunity", back_populates="assignee"
    )

    def __repr__(self):
        return f"<User id={self.id} name={self.name} role={self.role.value}>"
