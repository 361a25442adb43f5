from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from localconnect.auth.password import hash_password
from localconnect.core.config import settings
from localconnect.db import get_db
from localconnect.models import Event, EventAttendee, User
from localconnect.models.event import EventCategory, EventStatus
from localconnect.models.user import UserRole

router = APIRouter(prefix="/dev", tags=["dev"])

DBSession = Annotated[Session, Depends(get_db)]

logger = structlog.get_logger(__name__)


def _utc(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


DEMO_USERS = [
    {
        "key": "john",
        "name": "John Doe",
        "email": "john@example.com",
        "password": "password123",
        "phone_number": "555-123-4567",
        "role": UserRole.USER,
        "is_verified_organizer": False,
    },
    {
        "key": "admin",
        "name": "Admin User",
        "email": "admin@example.com",
        "password": "admin123",
        "phone_number": "555-987-6543",
        "role": UserRole.ADMIN,
        "is_verified_organizer": True,
    },
]

DEMO_EVENTS = [
    {
        "organizer": "john",
        "title": "Community Garage Sale",
        "description": "Join us for a community-wide garage sale! Find treasures and meet your neighbors.",
        "category": EventCategory.GARAGE_SALE,
        "image_url": "https://images.pexels.com/photos/5759935/pexels-photo-5759935.jpeg",
        "starts_at": "2025-06-15T09:00:00",
        "ends_at": "2025-06-15T16:00:00",
        "address": "123 Main St",
        "latitude": 37.7749,
        "longitude": -122.4194,
        "status": EventStatus.APPROVED,
        "attendees": [
            {
                "name": "Jane Smith",
                "email": "jane@example.com",
                "phone_number": "555-123-7890",
                "additional_attendees": 2,
            },
            {
                "name": "Bob Johnson",
                "email": "bob@example.com",
                "phone_number": "555-987-1234",
                "additional_attendees": 0,
            },
        ],
    },
    {
        "organizer": "admin",
        "title": "Neighborhood Soccer Tournament",
        "description": "Annual soccer tournament for all ages. Form teams or join existing ones!",
        "category": EventCategory.SPORTS,
        "image_url": "https://images.pexels.com/photos/46798/the-ball-stadion-football-the-pitch-46798.jpeg",
        "starts_at": "2025-07-10T10:00:00",
        "ends_at": "2025-07-10T18:00:00",
        "address": "456 Park Ave",
        "latitude": 37.7739,
        "longitude": -122.4312,
        "status": EventStatus.APPROVED,
        "attendees": [],
    },
    {
        "organizer": "john",
        "title": "Community Yoga Class",
        "description": "Free yoga class for all levels. Bring your own mat!",
        "category": EventCategory.COMMUNITY_CLASS,
        "image_url": "https://images.pexels.com/photos/8436586/pexels-photo-8436586.jpeg",
        "starts_at": "2025-06-20T18:00:00",
        "ends_at": "2025-06-20T19:30:00",
        "address": "789 Oak St",
        "latitude": 37.7729,
        "longitude": -122.4292,
        "status": EventStatus.PENDING,
        "attendees": [],
    },
]


def _require_dev_access(x_dev_api_key: Annotated[str | None, Header()] = None) -> None:
    if not settings.dev_routes_enabled:
        raise HTTPException(status_code=404, detail="not found")
    if settings.dev_api_key and x_dev_api_key != settings.dev_api_key:
        raise HTTPException(status_code=401, detail="invalid dev api key")


@router.post("/seed", dependencies=[Depends(_require_dev_access)])
def dev_seed(db: DBSession):
    users: dict[str, User] = {}
    created = {"users": 0, "events": 0, "attendees": 0}

    for demo in DEMO_USERS:
        user = db.scalar(select(User).where(User.email == demo["email"]))
        if not user:
            user = User(
                email=demo["email"],
                name=demo["name"],
                phone_number=demo["phone_number"],
                password_hash=hash_password(demo["password"]),
                role=demo["role"],
                is_verified_organizer=demo["is_verified_organizer"],
            )
            db.add(user)
            db.flush()
            created["users"] += 1
        users[demo["key"]] = user

    for demo in DEMO_EVENTS:
        organizer = users[demo["organizer"]]
        event = db.scalar(
            select(Event).where(
                Event.title == demo["title"],
                Event.organizer_id == organizer.id,
            )
        )
        if event:
            continue

        event = Event(
            title=demo["title"],
            description=demo["description"],
            category=demo["category"],
            image_url=demo["image_url"],
            starts_at=_utc(demo["starts_at"]),
            ends_at=_utc(demo["ends_at"]),
            address=demo["address"],
            city="Anytown",
            state="CA",
            zip_code="12345",
            latitude=demo["latitude"],
            longitude=demo["longitude"],
            organizer_id=organizer.id,
            status=demo["status"],
        )
        db.add(event)
        db.flush()
        created["events"] += 1

        for attendee in demo["attendees"]:
            db.add(EventAttendee(event_id=event.id, **attendee))
            created["attendees"] += 1

    db.commit()
    logger.info("dev_seed_completed", **created)
    return {"status": "ok", "created": created}
