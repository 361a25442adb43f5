from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import EmailStr, Field

from localconnect.api.v1.schemas.events import SchemaBase


class AttendeeCreate(SchemaBase):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone_number: str = Field(min_length=10, max_length=40)
    additional_attendees: int = Field(default=0, ge=0, le=10)


class AttendeeOut(SchemaBase):
    id: UUID
    event_id: UUID
    user_id: UUID | None = None
    name: str
    email: str
    phone_number: str
    additional_attendees: int
    created_at: datetime


class AttendeeListOut(SchemaBase):
    items: list[AttendeeOut]
    registrations: int = Field(ge=0)
    total_attendees: int = Field(ge=0)


class NotificationType(str, Enum):
    REMINDER = "reminder"
    UPDATE = "update"
    CANCELLATION = "cancellation"


class NotificationIn(SchemaBase):
    type: NotificationType


class NotificationQueuedOut(SchemaBase):
    status: str = "queued"
    type: NotificationType
    recipients: int = Field(ge=0)
