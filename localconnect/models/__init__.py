from localconnect.models.base import Base
from localconnect.models.event import Event, EventCategory, EventStatus
from localconnect.models.event_attendee import EventAttendee
from localconnect.models.notification_log import NotificationKind, NotificationLog
from localconnect.models.refresh_token import RefreshToken
from localconnect.models.user import User, UserRole, UserStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "UserStatus",
    "Event",
    "EventCategory",
    "EventStatus",
    "EventAttendee",
    "NotificationKind",
    "NotificationLog",
    "RefreshToken",
]
