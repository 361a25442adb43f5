from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from localconnect.api.v1.schemas.users import ProfileUpdate, UserUpdate
from localconnect.models import RefreshToken, User
from localconnect.models.user import UserStatus
from localconnect.services.error_codes import ErrorCode
from localconnect.services.exceptions import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


def get_user_or_404(db: Session, user_id: Any) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(ErrorCode.USER_NOT_FOUND, "user not found")
    return user


def list_users(db: Session, query: str | None = None, limit: int = 50) -> list[User]:
    stmt = select(User).order_by(User.created_at.desc()).limit(limit)
    if query:
        term = query.strip()
        stmt = stmt.where(
            or_(
                User.email.icontains(term, autoescape=True),
                User.name.icontains(term, autoescape=True),
            )
        )
    return list(db.scalars(stmt).all())


def update_profile(db: Session, user: User, patch: ProfileUpdate) -> User:
    patch_data = patch.model_dump(exclude_unset=True)
    if not patch_data:
        raise ValidationError(ErrorCode.NO_CHANGES, "no changes provided")

    for key, value in patch_data.items():
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def revoke_sessions(db: Session, user_id: Any) -> int:
    now = datetime.now(timezone.utc)
    result = db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id)
        .where(RefreshToken.revoked_at.is_(None))
        .values(revoked_at=now)
    )
    return result.rowcount or 0


def revoke_user_sessions(db: Session, admin: User, user_id: Any) -> int:
    user = get_user_or_404(db, user_id)
    revoked = revoke_sessions(db, user.id)
    db.commit()

    logger.info(
        "sessions_revoked",
        user_id=str(user.id),
        admin_id=str(admin.id),
        revoked=revoked,
    )
    return revoked


def update_user(db: Session, admin: User, user_id: Any, patch: UserUpdate) -> User:
    if patch.role is None and patch.status is None:
        raise ValidationError(ErrorCode.NO_CHANGES, "no changes provided")

    user = get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise ValidationError(ErrorCode.CANNOT_MODIFY_SELF, "cannot change own role or status")

    if patch.role is not None:
        user.role = patch.role
    if patch.status is not None:
        user.status = patch.status
        if patch.status == UserStatus.BANNED:
            revoke_sessions(db, user.id)

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(
        "user_updated",
        user_id=str(user.id),
        admin_id=str(admin.id),
        role=user.role.value,
        status=user.status.value,
    )
    return user


def set_verified_organizer(db: Session, admin: User, user_id: Any, is_verified: bool) -> User:
    user = get_user_or_404(db, user_id)
    user.is_verified_organizer = is_verified
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(
        "user_verification_changed",
        user_id=str(user.id),
        admin_id=str(admin.id),
        is_verified=is_verified,
    )
    return user


def toggle_ban(db: Session, admin: User, user_id: Any) -> User:
    user = get_user_or_404(db, user_id)
    if user.id == admin.id:
        raise ValidationError(ErrorCode.CANNOT_MODIFY_SELF, "cannot ban yourself")

    if user.status == UserStatus.BANNED:
        user.status = UserStatus.ACTIVE
    else:
        user.status = UserStatus.BANNED
        revoke_sessions(db, user.id)

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(
        "user_ban_toggled",
        user_id=str(user.id),
        admin_id=str(admin.id),
        status=user.status.value,
    )
    return user


def user_stats(db: Session) -> dict[str, int]:
    total = int(db.scalar(select(func.count()).select_from(User)) or 0)
    verified = int(
        db.scalar(
            select(func.count()).select_from(User).where(User.is_verified_organizer.is_(True))
        )
        or 0
    )
    banned = int(
        db.scalar(select(func.count()).select_from(User).where(User.status == UserStatus.BANNED))
        or 0
    )
    return {
        "total_users": total,
        "verified_organizers": verified,
        "banned_users": banned,
    }
