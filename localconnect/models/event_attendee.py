import uuid

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from localconnect.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class EventAttendee(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "event_attendees"
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_event_attendee_event_email"),)

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Anonymous registrations have no user
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(40), nullable=False)
    additional_attendees: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
