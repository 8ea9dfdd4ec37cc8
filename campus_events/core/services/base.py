"""Base service class for business logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from campus_events.core.exceptions import StoreError
from campus_events.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class BaseService:
    """Base class for feature services.

    Loggers:
        - self.logger: Standard logger for INFO/WARNING/ERROR
        - self._lazy: Lazy logger for DEBUG (callables only evaluated when enabled)

    Example:
        class EventService(BaseService):
            def __init__(self, session: AsyncSession):
                super().__init__()
                self._session = session
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)

    async def _commit(self, session: AsyncSession, operation: str) -> None:
        """Commit the unit of work, rolling back and raising StoreError on failure.

        Raises:
            StoreError: If the database rejects the commit.
        """
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            self.logger.exception(
                "Database commit failed",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise StoreError(extra={"operation": operation}) from exc
