from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from localconnect.auth.jwt import user_id_from_claims, verify_access_token
from localconnect.core.config import settings
from localconnect.db import get_db
from localconnect.models import User
from localconnect.models.user import UserRole, UserStatus
from localconnect.services.error_codes import ErrorCode

DBSession = Annotated[Session, Depends(get_db)]


def unauthorized(detail: str = "unauthorized") -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def inactive_user() -> HTTPException:
    return HTTPException(
        status_code=403,
        detail={"code": ErrorCode.USER_BANNED.value, "message": "user is not active"},
    )


def _bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.removeprefix("Bearer ").strip() or None


def _dev_user(db: Session, token: str) -> User:
    prefix = settings.dev_auth_prefix
    if not token.startswith(prefix):
        raise unauthorized(f"invalid dev token (expected prefix {prefix})")

    email = token.removeprefix(prefix).strip().lower()
    if "@" not in email:
        raise unauthorized("invalid email in token")

    user = db.scalar(select(User).where(User.email == email))
    if not user:
        user = User(email=email, name=None)
        db.add(user)
        db.commit()
        db.refresh(user)
    return user


def _jwt_user(db: Session, token: str) -> User:
    try:
        claims = verify_access_token(token)
        user_id = user_id_from_claims(claims)
    except ValueError:
        raise unauthorized("invalid access token") from None

    user = db.get(User, user_id)
    if not user:
        raise unauthorized("user not found")
    return user


def _resolve_user(db: Session, token: str) -> User:
    # Local dev auth only
    if settings.auth_mode == "dev" and settings.env == "local":
        user = _dev_user(db, token)
    elif settings.auth_mode == "jwt":
        user = _jwt_user(db, token)
    else:
        raise unauthorized("auth not configured")

    if user.status != UserStatus.ACTIVE:
        raise inactive_user()
    return user


def get_current_user(request: Request, db: DBSession) -> User:
    token = _bearer_token(request)
    if not token:
        raise unauthorized("missing bearer token")
    return _resolve_user(db, token)


def get_optional_user(request: Request, db: DBSession) -> User | None:
    token = _bearer_token(request)
    if not token:
        return None
    return _resolve_user(db, token)


def require_role(*roles: UserRole):
    allowed = set(roles)

    def _dependency(user: Annotated[User, Depends(get_current_user)]) -> User:
        if user.role not in allowed:
            raise HTTPException(status_code=403, detail="insufficient role")
        return user

    return _dependency


CurrentUser = Annotated[User, Depends(get_current_user)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
AdminUser = Annotated[User, Depends(require_role(UserRole.ADMIN))]
