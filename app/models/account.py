"""
Account (company) and Contact (person at a company) models.
"""
import uuid
from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    """A prospect or client company."""

    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(256), nullable=False, index=True)
    industry: Mapped[str] = mapped_column(String(64), nullable=False, default="Other")
    website: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    revenue_range: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    tech_stack: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    contacts: Mapped[list["Contact"]] = relationship(
        "Contact",
        back_populates="account",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Account id={self.id} name={self.name}>"


class Contact(Base):
    """A person at an account."""

    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    account_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True, index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    title: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )

    account: Mapped[Optional[Account]] = relationship("Account", back_populates="contacts")

    def __repr__(self):
        return f"<Contact id={self.id} account_id={self.account_id} name={self.name}>"
