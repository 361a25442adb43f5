from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from localconnect.api.v1.schemas.events import SchemaBase
from localconnect.models.user import UserRole, UserStatus


class UserOut(SchemaBase):
    id: UUID
    email: str
    name: str | None = None
    phone_number: str | None = None
    role: UserRole
    status: UserStatus
    is_verified_organizer: bool
    created_at: datetime
    last_login_at: datetime | None = None


class ProfileUpdate(SchemaBase):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    phone_number: str | None = Field(default=None, min_length=10, max_length=40)


class UserUpdate(SchemaBase):
    role: UserRole | None = None
    status: UserStatus | None = None


class VerifiedUpdate(SchemaBase):
    is_verified: bool


class AdminStatsOut(SchemaBase):
    pending_events: int
    approved_events: int
    rejected_events: int
    total_users: int
    verified_organizers: int
    banned_users: int
