from __future__ import annotations

import uuid

import structlog
from kombu.exceptions import OperationalError

from localconnect.models.notification_log import NotificationKind
from localconnect.worker.tasks import send_event_notification, send_registration_confirmation

logger = structlog.get_logger(__name__)


def enqueue_registration_confirmation(attendee_id: uuid.UUID) -> str | None:
    try:
        result = send_registration_confirmation.delay(str(attendee_id))
    except OperationalError:
        logger.warning("notification_enqueue_failed", kind="registration", attendee_id=str(attendee_id))
        return None
    return result.id


def enqueue_event_notification(event_id: uuid.UUID, kind: NotificationKind) -> str | None:
    try:
        result = send_event_notification.delay(str(event_id), kind.value)
    except OperationalError:
        logger.warning("notification_enqueue_failed", kind=kind.value, event_id=str(event_id))
        return None
    return result.id
