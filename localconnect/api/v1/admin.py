from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas import (
    AdminStatsOut,
    EventOut,
    EventStatusUpdate,
    UserOut,
    UserUpdate,
    VerifiedUpdate,
)
from localconnect.auth.deps import AdminUser, require_role
from localconnect.db import get_db
from localconnect.models.event import EventStatus
from localconnect.models.user import UserRole
from localconnect.services import events_service, users_service

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_role(UserRole.ADMIN))],
)

DBSession = Annotated[Session, Depends(get_db)]


@router.get("/events/pending", response_model=list[EventOut])
def list_pending_events(db: DBSession):
    return [EventOut.from_event(e) for e in events_service.list_pending_events(db)]


@router.patch("/events/{event_id}/status", response_model=EventOut)
def update_event_status(
    event_id: uuid.UUID, payload: EventStatusUpdate, db: DBSession, admin: AdminUser
):
    event = events_service.update_event_status(db, admin, event_id, payload.status)
    return EventOut.from_event(event)


@router.get("/users", response_model=list[UserOut])
def list_users(
    db: DBSession,
    query: str | None = Query(default=None, min_length=1),
    limit: int = Query(default=50, ge=1, le=200),
):
    return [UserOut.model_validate(u) for u in users_service.list_users(db, query, limit)]


@router.get("/users/{user_id}/events", response_model=list[EventOut])
def user_event_history(user_id: uuid.UUID, db: DBSession):
    user = users_service.get_user_or_404(db, user_id)
    return [EventOut.from_event(e) for e in events_service.list_events_by_organizer(db, user.id)]


@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(user_id: uuid.UUID, payload: UserUpdate, db: DBSession, admin: AdminUser):
    return UserOut.model_validate(users_service.update_user(db, admin, user_id, payload))


@router.patch("/users/{user_id}/verified", response_model=UserOut)
def set_verified(user_id: uuid.UUID, payload: VerifiedUpdate, db: DBSession, admin: AdminUser):
    user = users_service.set_verified_organizer(db, admin, user_id, payload.is_verified)
    return UserOut.model_validate(user)


@router.post("/users/{user_id}/ban", response_model=UserOut)
def toggle_ban(user_id: uuid.UUID, db: DBSession, admin: AdminUser):
    return UserOut.model_validate(users_service.toggle_ban(db, admin, user_id))


@router.post("/users/{user_id}/revoke-sessions")
def revoke_sessions(user_id: uuid.UUID, db: DBSession, admin: AdminUser):
    return {"revoked": users_service.revoke_user_sessions(db, admin, user_id)}


@router.get("/stats", response_model=AdminStatsOut)
def stats(db: DBSession):
    event_counts = events_service.count_events_by_status(db)
    return AdminStatsOut(
        pending_events=event_counts[EventStatus.PENDING],
        approved_events=event_counts[EventStatus.APPROVED],
        rejected_events=event_counts[EventStatus.REJECTED],
        **users_service.user_stats(db),
    )
