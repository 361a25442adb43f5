from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas.attendees import AttendeeCreate, NotificationType
from localconnect.models import EventAttendee, User
from localconnect.models.event import EventStatus
from localconnect.models.notification_log import NotificationKind
from localconnect.services.error_codes import ErrorCode
from localconnect.services.events_service import (
    can_manage,
    get_event_or_404,
    get_visible_event,
)
from localconnect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
)
from localconnect.services.notifications import (
    enqueue_event_notification,
    enqueue_registration_confirmation,
)

logger = structlog.get_logger(__name__)


def _find_registration(db: Session, event_id: Any, email: str) -> EventAttendee | None:
    return db.scalar(
        select(EventAttendee).where(
            EventAttendee.event_id == event_id,
            EventAttendee.email == email,
        )
    )


def register_for_event(
    db: Session, user: User | None, event_id: Any, payload: AttendeeCreate
) -> EventAttendee:
    event = get_visible_event(db, user, event_id)
    if event.status != EventStatus.APPROVED:
        raise ConflictError(ErrorCode.EVENT_NOT_APPROVED, "event is not open for registration")

    email = str(payload.email).strip().lower()
    if _find_registration(db, event.id, email):
        raise ConflictError(
            ErrorCode.ATTENDEE_ALREADY_REGISTERED, "email already registered for this event"
        )

    attendee = EventAttendee(
        event_id=event.id,
        user_id=user.id if user else None,
        name=payload.name,
        email=email,
        phone_number=payload.phone_number,
        additional_attendees=payload.additional_attendees,
    )
    db.add(attendee)

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(
            ErrorCode.ATTENDEE_ALREADY_REGISTERED, "email already registered for this event"
        ) from exc

    db.refresh(attendee)
    logger.info(
        "attendee_registered",
        event_id=str(event.id),
        attendee_id=str(attendee.id),
        user_id=str(user.id) if user else None,
    )

    enqueue_registration_confirmation(attendee.id)
    return attendee


def list_attendees(db: Session, user: User, event_id: Any) -> list[EventAttendee]:
    event = get_event_or_404(db, event_id)
    if not can_manage(user, event):
        raise PermissionDeniedError(ErrorCode.NOT_EVENT_ORGANIZER, "not organizer for this event")

    return list(
        db.scalars(
            select(EventAttendee)
            .where(EventAttendee.event_id == event.id)
            .order_by(EventAttendee.created_at.asc())
        ).all()
    )


def total_headcount(attendees: list[EventAttendee]) -> int:
    return sum(1 + a.additional_attendees for a in attendees)


def list_registrations_for_user(db: Session, user: User) -> list[EventAttendee]:
    return list(
        db.scalars(
            select(EventAttendee)
            .where(EventAttendee.user_id == user.id)
            .order_by(EventAttendee.created_at.desc())
        ).all()
    )


def cancel_registration(db: Session, user: User, event_id: Any, attendee_id: Any) -> None:
    event = get_event_or_404(db, event_id)

    attendee = db.get(EventAttendee, attendee_id)
    if not attendee or attendee.event_id != event.id:
        raise NotFoundError(ErrorCode.ATTENDEE_NOT_FOUND, "registration not found")

    owns_registration = attendee.user_id is not None and attendee.user_id == user.id
    if not owns_registration and not can_manage(user, event):
        raise PermissionDeniedError(
            ErrorCode.NOT_EVENT_ORGANIZER, "cannot cancel someone else's registration"
        )

    db.delete(attendee)
    db.commit()
    logger.info(
        "attendee_cancelled",
        event_id=str(event.id),
        attendee_id=str(attendee_id),
        user_id=str(user.id),
    )


def notify_attendees(db: Session, user: User, event_id: Any, kind: NotificationType) -> int:
    attendees = list_attendees(db, user, event_id)
    enqueue_event_notification(event_id, NotificationKind(kind.value))
    return len(attendees)
