from localconnect.services.attendees_service import (
    cancel_registration,
    list_attendees,
    notify_attendees,
    register_for_event,
)
from localconnect.services.events_service import (
    create_event,
    delete_event,
    list_events,
    list_pending_events,
    update_event,
    update_event_status,
)
from localconnect.services.users_service import (
    set_verified_organizer,
    toggle_ban,
    update_user,
)

__all__ = [
    "create_event",
    "update_event",
    "delete_event",
    "list_events",
    "list_pending_events",
    "update_event_status",
    "register_for_event",
    "list_attendees",
    "cancel_registration",
    "notify_attendees",
    "update_user",
    "set_verified_organizer",
    "toggle_ban",
]
