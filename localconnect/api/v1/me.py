from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas import AttendeeOut, EventOut, ProfileUpdate, UserOut
from localconnect.auth.deps import CurrentUser
from localconnect.db import get_db
from localconnect.services.attendees_service import list_registrations_for_user
from localconnect.services.events_service import list_events_by_organizer
from localconnect.services.users_service import update_profile

router = APIRouter(prefix="/me", tags=["me"])

DBSession = Annotated[Session, Depends(get_db)]


@router.get("", response_model=UserOut)
def me(user: CurrentUser):
    return UserOut.model_validate(user)


@router.patch("", response_model=UserOut)
def update_me(payload: ProfileUpdate, user: CurrentUser, db: DBSession):
    return UserOut.model_validate(update_profile(db, user, payload))


@router.get("/events", response_model=list[EventOut])
def my_events(user: CurrentUser, db: DBSession):
    return [EventOut.from_event(e) for e in list_events_by_organizer(db, user.id)]


@router.get("/registrations", response_model=list[AttendeeOut])
def my_registrations(user: CurrentUser, db: DBSession):
    return [AttendeeOut.model_validate(a) for a in list_registrations_for_user(db, user)]
