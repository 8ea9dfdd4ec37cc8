"""SQLAlchemy models for event registrations."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_events.core.database import Base, TimestampMixin, UUIDPKMixin


class Registration(Base, UUIDPKMixin, TimestampMixin):
    """A user's registration for an event.

    ``user_name`` and ``event_title`` are snapshots taken at registration
    time. At most one row exists per (event_id, user_email).
    """

    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_email", name="uq_registrations_event_id_user_email"),
    )

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_title: Mapped[str] = mapped_column(String(200), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Registration(event_id={self.event_id}, user_email={self.user_email!r})>"
