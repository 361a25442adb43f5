import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas import (
    AttendeeCreate,
    AttendeeListOut,
    AttendeeOut,
    EventCreate,
    EventListOut,
    EventOut,
    EventUpdate,
    NotificationIn,
    NotificationQueuedOut,
)
from localconnect.auth.deps import CurrentUser, OptionalUser, unauthorized
from localconnect.db import get_db
from localconnect.models.event import EventCategory, EventStatus
from localconnect.services import attendees_service, events_service

router = APIRouter(prefix="/events", tags=["events"])

DBSession = Annotated[Session, Depends(get_db)]


@router.get("", response_model=EventListOut)
def list_events(
    db: DBSession,
    viewer: OptionalUser,
    category: EventCategory | None = None,
    status: EventStatus | None = None,
    q: str | None = Query(default=None, max_length=200),
    mine: bool = False,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
):
    if mine and viewer is None:
        raise unauthorized("sign in to list your events")

    items, total = events_service.list_events(
        db,
        viewer,
        category=category,
        status=status,
        q=q,
        mine=mine,
        page=page,
        page_size=page_size,
    )
    return EventListOut(
        items=[EventOut.from_event(e) for e in items],
        page=page,
        page_size=page_size,
        total=total,
    )


@router.post("", response_model=EventOut, status_code=201)
def create_event(payload: EventCreate, user: CurrentUser, db: DBSession):
    return EventOut.from_event(events_service.create_event(db, user, payload))


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: uuid.UUID, db: DBSession, viewer: OptionalUser):
    return EventOut.from_event(events_service.get_visible_event(db, viewer, event_id))


@router.patch("/{event_id}", response_model=EventOut)
def update_event(event_id: uuid.UUID, payload: EventUpdate, user: CurrentUser, db: DBSession):
    return EventOut.from_event(events_service.update_event(db, user, event_id, payload))


@router.delete("/{event_id}", status_code=204)
def delete_event(event_id: uuid.UUID, user: CurrentUser, db: DBSession):
    events_service.delete_event(db, user, event_id)
    return Response(status_code=204)


@router.post("/{event_id}/attendees", response_model=AttendeeOut, status_code=201)
def register_for_event(
    event_id: uuid.UUID, payload: AttendeeCreate, db: DBSession, viewer: OptionalUser
):
    attendee = attendees_service.register_for_event(db, viewer, event_id, payload)
    return AttendeeOut.model_validate(attendee)


@router.get("/{event_id}/attendees", response_model=AttendeeListOut)
def list_attendees(event_id: uuid.UUID, user: CurrentUser, db: DBSession):
    attendees = attendees_service.list_attendees(db, user, event_id)
    return AttendeeListOut(
        items=[AttendeeOut.model_validate(a) for a in attendees],
        registrations=len(attendees),
        total_attendees=attendees_service.total_headcount(attendees),
    )


@router.delete("/{event_id}/attendees/{attendee_id}", status_code=204)
def cancel_registration(
    event_id: uuid.UUID, attendee_id: uuid.UUID, user: CurrentUser, db: DBSession
):
    attendees_service.cancel_registration(db, user, event_id, attendee_id)
    return Response(status_code=204)


@router.post("/{event_id}/notifications", response_model=NotificationQueuedOut, status_code=202)
def send_notification(
    event_id: uuid.UUID, payload: NotificationIn, user: CurrentUser, db: DBSession
):
    recipients = attendees_service.notify_attendees(db, user, event_id, payload.type)
    return NotificationQueuedOut(type=payload.type, recipients=recipients)
