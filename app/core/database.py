"""
Async engine and per-request sessions for the gateway store.
"""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.base import Base
from app.core.config import settings

# Registers every table on Base.metadata
from app.models.user import User
from app.models.account import Account, Contact
from app.models.opportunity import Opportunity
from app.models.activity import Activity
from app.models.app_setting import AppSetting


def build_engine(url: str, **overrides) -> AsyncEngine:
    """Async engine for `url`; pool sizing only applies to server databases."""
    engine_args = {"echo": settings.DEBUG}
    if url.startswith("sqlite"):
        engine_args["connect_args"] = {"check_same_thread": False}
    else:
        engine_args.update({
            "pool_pre_ping": True,
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
        })
    engine_args.update(overrides)
    return create_async_engine(url, **engine_args)


def build_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine(settings.DATABASE_URL)
AsyncSessionLocal = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    The whole request is one transaction: committed when the endpoint
    returns, rolled back when it raises. Bulk upserts rely on this for
    their all-or-nothing behaviour.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create any missing tables."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
