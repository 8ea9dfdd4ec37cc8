"""Minimal generic repository for SQLAlchemy models.

Provides basic CRUD operations with explicit session passing. Feature
repositories subclass it and add their own queries; anything more complex
can use the session directly.

Example:
    class UserRepository(BaseRepository[User]):
        async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
            return await self.get_by(session, User.email, email)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import inspect as sa_inspect
from sqlalchemy import select

from campus_events.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Thin CRUD layer over a single model.

    Provides:
        - get(session, id) -> T | None
        - get_by(session, attr, value) -> T | None
        - list(session, limit, offset, order_by) -> Sequence[T]
        - create(session, instance) -> T
        - update(session, instance, values) -> T
        - delete(session, instance) -> None

    Methods flush but never commit; the caller owns the transaction.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        """Get entity by primary key, or None."""
        instance = await session.get(self.model, id)
        self._lazy.debug(
            lambda: f"db.get: {self.model.__name__}({id}) -> {'found' if instance else 'not found'}"
        )
        return instance

    async def get_by(
        self,
        session: AsyncSession,
        attr: InstrumentedAttribute[Any],
        value: Any,
    ) -> T | None:
        """Get the first entity whose ``attr`` equals ``value``.

        Example:
            user = await repo.get_by(session, User.email, "a@x.com")
        """
        stmt = select(self.model).where(attr == value).limit(1)
        result = await session.execute(stmt)
        instance = result.scalars().first()
        self._lazy.debug(
            lambda: f"db.get_by: {self.model.__name__}.{attr.key}={value!r} -> {'found' if instance else 'not found'}"
        )
        return instance

    async def list(
        self,
        session: AsyncSession,
        *,
        limit: int = 100,
        offset: int = 0,
        order_by: Any | None = None,
    ) -> Sequence[T]:
        """List entities with pagination."""
        stmt = select(self.model)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        stmt = stmt.limit(limit).offset(offset)
        result = await session.execute(stmt)
        items = result.scalars().all()
        self._lazy.debug(
            lambda: f"db.list: {self.model.__name__}(limit={limit}, offset={offset}) -> {len(items)} items"
        )
        return items

    async def create(self, session: AsyncSession, instance: T) -> T:
        """Add a new entity, flush, and refresh generated columns."""
        session.add(instance)
        await session.flush()
        await session.refresh(instance)

        entity_id = getattr(instance, "id", None)
        self._lazy.debug(lambda: f"db.create: {self.model.__name__}(id={entity_id})")
        return instance

    async def update(
        self,
        session: AsyncSession,
        instance: T,
        values: dict[str, Any],
    ) -> T:
        """Apply ``values`` to mapped columns of ``instance`` and flush.

        Keys that are not mapped columns are ignored, so partial payloads can
        be passed straight through.
        """
        columns = {attr.key for attr in sa_inspect(self.model).column_attrs}
        changed = [key for key in values if key in columns]
        for key in changed:
            setattr(instance, key, values[key])
        await session.flush()
        await session.refresh(instance)

        self._lazy.debug(
            lambda: f"db.update: {self.model.__name__}(id={getattr(instance, 'id', None)}) fields={sorted(changed)}"
        )
        return instance

    async def delete(self, session: AsyncSession, instance: T) -> None:
        """Delete an entity and flush."""
        entity_id = getattr(instance, "id", None)
        await session.delete(instance)
        await session.flush()

        self._logger.info(
            "Entity deleted",
            extra={"entity": self.model.__name__, "id": str(entity_id), "operation": "db.delete"},
        )
