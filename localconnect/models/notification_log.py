import uuid
from enum import Enum

import sqlalchemy as sa
from sqlalchemy import ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from localconnect.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from localconnect.models.user import _enum_values


class NotificationKind(str, Enum):
    REGISTRATION = "registration"
    REMINDER = "reminder"
    UPDATE = "update"
    CANCELLATION = "cancellation"


class NotificationLog(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "notification_logs"

    event_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="SET NULL"), nullable=True, index=True
    )
    attendee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("event_attendees.id", ondelete="SET NULL"), nullable=True
    )
    recipient_email: Mapped[str] = mapped_column(String(320), nullable=False)
    kind: Mapped[NotificationKind] = mapped_column(
        sa.Enum(NotificationKind, name="notification_kind", values_callable=_enum_values),
        nullable=False,
    )
