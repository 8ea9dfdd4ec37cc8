"""Database dependencies for FastAPI route handlers.

Route handlers take ``session: DbSession``; the session is closed when the
request completes. Background work uses
``campus_events.infra.database.get_async_session`` instead. Tests override
``get_db_session`` with a session bound to an in-memory engine.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency yielding a request-scoped database session."""
    async with get_async_session() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db_session)]

__all__ = ["DbSession", "get_db_session"]
