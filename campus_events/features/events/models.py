"""SQLAlchemy models for the events feature."""
from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_events.core.database import Base, TimestampMixin, UUIDPKMixin


class Event(Base, UUIDPKMixin, TimestampMixin):
    """A campus event.

    ``date``, ``time`` and ``location`` are free-form strings as entered by
    organizers ("2024-05-01", "7 PM", "Main Hall"); they are displayed, never
    computed with.
    """

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[str | None] = mapped_column(String(50), nullable=True)
    time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instruction: Mapped[str | None] = mapped_column(Text(), nullable=True)
    image: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
        comment="Image URL or path relative to the uploads directory",
    )
    link: Mapped[str | None] = mapped_column(String(500), nullable=True)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title!r})>"
