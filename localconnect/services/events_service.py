from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas.events import EventCreate, EventUpdate
from localconnect.core.config import settings
from localconnect.models import Event, User
from localconnect.models.event import EventCategory, EventStatus
from localconnect.models.user import UserRole
from localconnect.services.error_codes import ErrorCode
from localconnect.services.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = structlog.get_logger(__name__)

LOCATION_FIELDS = ("address", "city", "state", "zip_code", "latitude", "longitude")


def is_admin(user: User | None) -> bool:
    return user is not None and user.role == UserRole.ADMIN


def can_manage(user: User | None, event: Event) -> bool:
    if user is None:
        return False
    return is_admin(user) or event.organizer_id == user.id


def _require_manage_permission(user: User, event: Event) -> None:
    if not can_manage(user, event):
        raise PermissionDeniedError(ErrorCode.NOT_EVENT_ORGANIZER, "not organizer for this event")


def get_event_or_404(db: Session, event_id: Any) -> Event:
    event = db.get(Event, event_id)
    if not event:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")
    return event


def get_visible_event(db: Session, viewer: User | None, event_id: Any) -> Event:
    event = get_event_or_404(db, event_id)
    # Unapproved events are hidden rather than forbidden
    if event.status != EventStatus.APPROVED and not can_manage(viewer, event):
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")
    return event


def _apply_search(stmt: Select, q: str) -> Select:
    term = q.strip()
    return stmt.where(
        or_(
            Event.title.icontains(term, autoescape=True),
            Event.description.icontains(term, autoescape=True),
            Event.city.icontains(term, autoescape=True),
            Event.address.icontains(term, autoescape=True),
        )
    )


def list_events(
    db: Session,
    viewer: User | None,
    *,
    category: EventCategory | None = None,
    status: EventStatus | None = None,
    q: str | None = None,
    mine: bool = False,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Event], int]:
    stmt = select(Event)

    if mine and viewer is not None:
        stmt = stmt.where(Event.organizer_id == viewer.id)
        if status is not None:
            stmt = stmt.where(Event.status == status)
    elif is_admin(viewer):
        if status is not None:
            stmt = stmt.where(Event.status == status)
    else:
        # Public browsing only ever sees approved events
        if status is not None and status != EventStatus.APPROVED:
            return [], 0
        stmt = stmt.where(Event.status == EventStatus.APPROVED)

    if category is not None:
        stmt = stmt.where(Event.category == category)
    if q and q.strip():
        stmt = _apply_search(stmt, q)

    total = int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
    items = db.scalars(
        stmt.order_by(Event.starts_at.asc(), Event.created_at.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    ).all()
    return list(items), total


def list_events_by_organizer(db: Session, organizer_id: Any) -> list[Event]:
    return list(
        db.scalars(
            select(Event)
            .where(Event.organizer_id == organizer_id)
            .order_by(Event.created_at.desc())
        ).all()
    )


def create_event(db: Session, organizer: User, payload: EventCreate) -> Event:
    status = EventStatus.PENDING
    if settings.auto_approve_verified_organizers and organizer.is_verified_organizer:
        status = EventStatus.APPROVED

    event = Event(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        image_url=payload.image_url,
        starts_at=payload.starts_at,
        ends_at=payload.ends_at,
        organizer_id=organizer.id,
        status=status,
        **payload.location.model_dump(),
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(
        "event_created",
        event_id=str(event.id),
        organizer_id=str(organizer.id),
        status=event.status.value,
    )
    return event


def update_event(db: Session, user: User, event_id: Any, patch: EventUpdate) -> Event:
    event = get_event_or_404(db, event_id)
    _require_manage_permission(user, event)

    patch_data = patch.model_dump(exclude_unset=True)
    location = patch_data.pop("location", None)
    if location:
        patch_data.update({k: v for k, v in location.items() if k in LOCATION_FIELDS})

    new_starts_at = patch_data.get("starts_at") or event.starts_at
    new_ends_at = patch_data.get("ends_at") or event.ends_at
    if new_ends_at <= new_starts_at:
        raise ValidationError(ErrorCode.EVENT_INVALID_TIMES, "ends_at must be after starts_at")

    for key, value in patch_data.items():
        if key in {"title", "description", "category", "starts_at", "ends_at"} and value is None:
            continue
        setattr(event, key, value)

    # Any edit sends the event back through moderation
    event.status = EventStatus.PENDING

    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info("event_updated", event_id=str(event.id), user_id=str(user.id))
    return event


def delete_event(db: Session, user: User, event_id: Any) -> None:
    event = get_event_or_404(db, event_id)
    _require_manage_permission(user, event)

    db.delete(event)
    db.commit()
    logger.info("event_deleted", event_id=str(event_id), user_id=str(user.id))


def list_pending_events(db: Session) -> list[Event]:
    return list(
        db.scalars(
            select(Event)
            .where(Event.status == EventStatus.PENDING)
            .order_by(Event.created_at.asc())
        ).all()
    )


def update_event_status(db: Session, admin: User, event_id: Any, status: EventStatus) -> Event:
    if not is_admin(admin):
        raise PermissionDeniedError(ErrorCode.ADMIN_REQUIRED, "only admins can moderate events")

    event = get_event_or_404(db, event_id)
    previous = event.status
    event.status = status
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.info(
        "event_status_changed",
        event_id=str(event.id),
        admin_id=str(admin.id),
        previous=previous.value,
        status=status.value,
    )
    return event


def count_events_by_status(db: Session) -> dict[EventStatus, int]:
    rows = db.execute(select(Event.status, func.count()).group_by(Event.status)).all()
    counts = {status: 0 for status in EventStatus}
    for status, count in rows:
        counts[status] = int(count)
    return counts
