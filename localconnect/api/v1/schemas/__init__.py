from localconnect.api.v1.schemas.attendees import (
    AttendeeCreate,
    AttendeeListOut,
    AttendeeOut,
    NotificationIn,
    NotificationQueuedOut,
    NotificationType,
)
from localconnect.api.v1.schemas.events import (
    EventCreate,
    EventListOut,
    EventLocation,
    EventOut,
    EventStatusUpdate,
    EventUpdate,
)
from localconnect.api.v1.schemas.users import (
    AdminStatsOut,
    ProfileUpdate,
    UserOut,
    UserUpdate,
    VerifiedUpdate,
)

__all__ = [
    "AttendeeCreate",
    "AttendeeListOut",
    "AttendeeOut",
    "NotificationIn",
    "NotificationQueuedOut",
    "NotificationType",
    "EventCreate",
    "EventListOut",
    "EventLocation",
    "EventOut",
    "EventStatusUpdate",
    "EventUpdate",
    "AdminStatsOut",
    "ProfileUpdate",
    "UserOut",
    "UserUpdate",
    "VerifiedUpdate",
]
