from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, EmailStr, Field, StringConstraints
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from localconnect.auth.deps import inactive_user
from localconnect.auth.jwt import create_access_token
from localconnect.auth.password import hash_password, needs_rehash, verify_password
from localconnect.auth.tokens import (
    RefreshTokenError,
    issue_refresh_token,
    revoke_refresh_token,
    rotate_refresh_token,
)
from localconnect.core.config import settings
from localconnect.db import get_db
from localconnect.models import User
from localconnect.models.user import UserStatus

router = APIRouter(prefix="/auth", tags=["auth"])

DBSession = Annotated[Session, Depends(get_db)]

logger = structlog.get_logger(__name__)


class AuthTokensOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user_id: str
    email: str
    name: str | None
    role: str
    status: str
    is_verified_organizer: bool


def _set_refresh_cookie(response: Response, raw_refresh: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=raw_refresh,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite=settings.refresh_cookie_samesite,
        max_age=int(settings.refresh_token_ttl_days * 86400),
        path="/",
    )


def _tokens_out(user: User) -> AuthTokensOut:
    return AuthTokensOut(
        access_token=create_access_token(
            user.id,
            user.role.value,
            verified_organizer=user.is_verified_organizer,
        ),
        expires_in=settings.access_token_ttl_seconds,
        user_id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role.value,
        status=user.status.value,
        is_verified_organizer=user.is_verified_organizer,
    )


class RegisterIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
    phone_number: Annotated[
        str | None, StringConstraints(strip_whitespace=True, min_length=10, max_length=40)
    ] = None


@router.post("/register", response_model=AuthTokensOut)
def register(payload: RegisterIn, db: DBSession, response: Response):
    email = payload.email.strip().lower()
    existing = db.scalar(select(User).where(User.email == email))
    if existing:
        raise HTTPException(status_code=409, detail="email already registered")

    user = User(
        email=email,
        name=payload.name,
        phone_number=payload.phone_number,
        password_hash=hash_password(payload.password),
    )
    db.add(user)

    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="email already registered") from None

    raw_refresh, _ = issue_refresh_token(db, user.id)
    out = _tokens_out(user)
    db.commit()

    _set_refresh_cookie(response, raw_refresh)
    logger.info("user_registered", user_id=str(user.id))
    return out


class LoginIn(BaseModel):
    email: EmailStr
    password: str


@router.post("/login", response_model=AuthTokensOut)
def login(payload: LoginIn, db: DBSession, response: Response):
    email = payload.email.strip().lower()
    user = db.scalar(select(User).where(User.email == email))
    if not user or not user.password_hash:
        raise HTTPException(status_code=401, detail="invalid credentials")
    if not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="invalid credentials")
    if user.status != UserStatus.ACTIVE:
        raise inactive_user()

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(payload.password)
    user.last_login_at = datetime.now(timezone.utc)
    db.add(user)

    raw_refresh, _ = issue_refresh_token(db, user.id)
    out = _tokens_out(user)
    db.commit()

    _set_refresh_cookie(response, raw_refresh)
    return out


class RefreshIn(BaseModel):
    refresh_token: str | None = None


@router.post("/refresh", response_model=AuthTokensOut)
def refresh(request: Request, response: Response, db: DBSession, payload: RefreshIn | None = None):
    raw_refresh = payload.refresh_token if payload else None
    if not raw_refresh:
        raw_refresh = request.cookies.get(settings.refresh_cookie_name)
    if not raw_refresh:
        raise HTTPException(status_code=401, detail="missing refresh token")

    try:
        new_raw, new_token = rotate_refresh_token(db, raw_refresh)
    except RefreshTokenError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from None

    user = db.get(User, new_token.user_id)
    if not user:
        db.rollback()
        raise HTTPException(status_code=401, detail="user not found")
    if user.status != UserStatus.ACTIVE:
        db.rollback()
        raise inactive_user()

    out = _tokens_out(user)
    db.commit()

    _set_refresh_cookie(response, new_raw)
    return out


class LogoutIn(BaseModel):
    refresh_token: str | None = None


@router.post("/logout")
def logout(request: Request, response: Response, db: DBSession, payload: LogoutIn | None = None):
    raw_refresh = payload.refresh_token if payload else None
    if not raw_refresh:
        raw_refresh = request.cookies.get(settings.refresh_cookie_name)
    if raw_refresh:
        revoke_refresh_token(db, raw_refresh)

    db.commit()
    response.delete_cookie(key=settings.refresh_cookie_name, path="/")
    return {"status": "ok"}
