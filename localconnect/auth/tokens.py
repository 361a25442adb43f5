"""Refresh-token issuance, rotation and revocation.

Raw refresh tokens are only ever handed to the client; the database keeps a
peppered SHA-256 hash. Tokens issued from one login share a ``family_id`` so
a replayed (already rotated) token can revoke the whole chain.
"""

from __future__ import annotations

import hashlib
import secrets
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from localconnect.core.config import settings
from localconnect.models import RefreshToken


class RefreshTokenError(Exception):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


def hash_refresh_token(raw_token: str) -> str:
    data = f"{raw_token}{settings.refresh_token_pepper}".encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def issue_refresh_token(
    db: Session,
    user_id: uuid.UUID,
    family_id: uuid.UUID | None = None,
) -> tuple[str, RefreshToken]:
    raw_token = secrets.token_urlsafe(48)
    now = _now()

    token = RefreshToken(
        user_id=user_id,
        token_hash=hash_refresh_token(raw_token),
        issued_at=now,
        expires_at=now + timedelta(days=settings.refresh_token_ttl_days),
        family_id=family_id or uuid.uuid4(),
    )
    db.add(token)
    db.flush()
    return raw_token, token


def find_refresh_token(db: Session, raw_token: str) -> RefreshToken | None:
    return db.scalar(
        select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(raw_token))
    )


def rotate_refresh_token(db: Session, raw_token: str) -> tuple[str, RefreshToken]:
    token = find_refresh_token(db, raw_token)
    if not token:
        raise RefreshTokenError("invalid refresh token")

    now = _now()
    if token.revoked_at is not None:
        # Replay detected: revoke entire family
        if token.family_id:
            db.execute(
                update(RefreshToken)
                .where(RefreshToken.family_id == token.family_id)
                .values(revoked_at=now)
            )
        db.commit()
        raise RefreshTokenError("refresh token revoked")
    if token.expires_at <= now:
        raise RefreshTokenError("refresh token expired")

    new_raw, new_token = issue_refresh_token(db, token.user_id, token.family_id)
    token.revoked_at = now
    token.replaced_by = new_token.id
    db.add(token)
    return new_raw, new_token


def revoke_refresh_token(db: Session, raw_token: str) -> RefreshToken | None:
    token = find_refresh_token(db, raw_token)
    if not token:
        return None
    if token.revoked_at is None:
        token.revoked_at = _now()
        db.add(token)
    return token
