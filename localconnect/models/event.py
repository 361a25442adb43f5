from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from localconnect.models.base import Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin
from localconnect.models.user import User, _enum_values


class EventStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventCategory(str, Enum):
    GARAGE_SALE = "garage-sale"
    SPORTS = "sports"
    COMMUNITY_CLASS = "community-class"
    VOLUNTEER = "volunteer"
    EXHIBITION = "exhibition"
    FESTIVAL = "festival"


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"
    __table_args__ = (
        sa.Index("ix_events_status_starts_at", "status", "starts_at"),
        sa.CheckConstraint("ends_at > starts_at", name="ck_events_ends_after_starts"),
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[EventCategory] = mapped_column(
        sa.Enum(EventCategory, name="event_category", values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    starts_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    ends_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    # Location is flattened onto the row
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    state: Mapped[str] = mapped_column(String(120), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    organizer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[EventStatus] = mapped_column(
        sa.Enum(EventStatus, name="event_status", values_callable=_enum_values),
        nullable=False,
        default=EventStatus.PENDING,
    )

    organizer: Mapped[User] = relationship(lazy="joined")
    attendees: Mapped[list["EventAttendee"]] = relationship(  # noqa: F821
        cascade="all, delete-orphan",
        order_by="EventAttendee.created_at",
    )
