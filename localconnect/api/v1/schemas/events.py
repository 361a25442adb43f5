from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from localconnect.models import Event
from localconnect.models.event import EventCategory, EventStatus


def _ensure_tzaware(value: datetime | None) -> datetime | None:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("datetime must be timezone-aware")
    return value


def _normalize_image_url(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("Please enter a valid URL")
    return value


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore", str_strip_whitespace=True)


class TZAwareMixin(BaseModel):
    @field_validator("starts_at", "ends_at", mode="after", check_fields=False)
    @classmethod
    def _validate_tzaware(cls, value: datetime | None) -> datetime | None:
        return _ensure_tzaware(value)


class EventLocation(SchemaBase):
    address: str = Field(min_length=5, max_length=300)
    city: str = Field(min_length=2, max_length=120)
    state: str = Field(min_length=2, max_length=120)
    zip_code: str = Field(min_length=5, max_length=20)
    latitude: float = Field(default=0.0, ge=-90, le=90)
    longitude: float = Field(default=0.0, ge=-180, le=180)


class EventCreate(TZAwareMixin, SchemaBase):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=20, max_length=1000)
    category: EventCategory
    image_url: str | None = None
    starts_at: datetime
    ends_at: datetime
    location: EventLocation

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str | None) -> str | None:
        return _normalize_image_url(value)

    @model_validator(mode="after")
    def _validate_time_bounds(self):
        if self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class EventUpdate(TZAwareMixin, SchemaBase):
    title: str | None = Field(default=None, min_length=5, max_length=100)
    description: str | None = Field(default=None, min_length=20, max_length=1000)
    category: EventCategory | None = None
    image_url: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    location: EventLocation | None = None

    @field_validator("image_url")
    @classmethod
    def _validate_image_url(cls, value: str | None) -> str | None:
        return _normalize_image_url(value)

    @model_validator(mode="after")
    def _validate_time_bounds(self):
        if self.starts_at and self.ends_at and self.ends_at <= self.starts_at:
            raise ValueError("ends_at must be after starts_at")
        return self


class OrganizerOut(SchemaBase):
    id: UUID
    name: str | None = None
    is_verified: bool = False


class EventOut(SchemaBase):
    id: UUID
    title: str
    description: str
    category: EventCategory
    image_url: str | None = None
    starts_at: datetime
    ends_at: datetime
    location: EventLocation
    organizer: OrganizerOut
    status: EventStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_event(cls, event: Event) -> "EventOut":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            category=event.category,
            image_url=event.image_url,
            starts_at=event.starts_at,
            ends_at=event.ends_at,
            location=EventLocation.model_construct(
                address=event.address,
                city=event.city,
                state=event.state,
                zip_code=event.zip_code,
                latitude=event.latitude,
                longitude=event.longitude,
            ),
            organizer=OrganizerOut(
                id=event.organizer_id,
                name=event.organizer.name if event.organizer else None,
                is_verified=bool(event.organizer and event.organizer.is_verified_organizer),
            ),
            status=event.status,
            created_at=event.created_at,
            updated_at=event.updated_at,
        )


class EventListOut(SchemaBase):
    items: list[EventOut]
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)


class EventStatusUpdate(SchemaBase):
    status: EventStatus
