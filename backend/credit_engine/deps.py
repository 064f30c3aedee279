"""Dependency injection for FastAPI endpoints."""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from credit_engine.core.rate_limit import get_rate_limiter
from credit_engine.db.session import get_db

__all__ = ["get_db", "get_session", "get_rate_limiter"]


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    This is an alias for get_db for clarity in endpoint signatures.
    """
    async for session in get_db():
        yield session
