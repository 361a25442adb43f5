from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy import select, update

from localconnect.auth.jwt import verify_access_token
from localconnect.auth.tokens import hash_refresh_token
from localconnect.models import RefreshToken, User
from localconnect.models.user import UserRole, UserStatus


def register(
    client: TestClient,
    email: str,
    password: str = "StrongPass123",
    name: str = "Test User",
):
    return client.post(
        "/v1/auth/register",
        json={"email": email, "password": password, "name": name},
    )


def login(client: TestClient, email: str, password: str = "StrongPass123"):
    return client.post(
        "/v1/auth/login",
        json={"email": email, "password": password},
    )


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_user(client: TestClient, email: str, name: str = "Test User") -> str:
    register(client, email, name=name)
    return login(client, email).json()["access_token"]


def make_admin(client: TestClient, db_session, email: str) -> str:
    register(client, email, name="Admin User")
    db_session.execute(update(User).where(User.email == email).values(role=UserRole.ADMIN))
    db_session.commit()
    return login(client, email).json()["access_token"]


def test_register_then_login_works(client: TestClient):
    resp = register(client, "reg1@example.com")
    assert resp.status_code == 200
    assert resp.json()["role"] == "user"
    assert resp.json()["is_verified_organizer"] is False

    resp2 = login(client, "reg1@example.com")
    assert resp2.status_code == 200
    assert "access_token" in resp2.json()


def test_register_duplicate_email_conflicts(client: TestClient):
    register(client, "dup@example.com")
    resp = register(client, "DUP@example.com")
    assert resp.status_code == 409


def test_register_rejects_short_password(client: TestClient):
    resp = register(client, "short@example.com", password="short")
    assert resp.status_code == 422


def test_login_wrong_password_is_unauthorized(client: TestClient):
    register(client, "wrongpw@example.com")
    resp = login(client, "wrongpw@example.com", password="not-the-password")
    assert resp.status_code == 401


def test_login_sets_refresh_cookie(client: TestClient):
    register(client, "reg2@example.com")

    resp = login(client, "reg2@example.com")
    assert resp.status_code == 200
    assert resp.json()["access_token"]
    assert "localconnect_refresh" in resp.headers.get("set-cookie", "")


def test_refresh_rotates_token(client: TestClient, db_session):
    register(client, "reg3@example.com")
    resp = login(client, "reg3@example.com")
    assert resp.status_code == 200

    old_raw = client.cookies.get("localconnect_refresh")
    assert old_raw
    old_hash = hash_refresh_token(old_raw)
    old_token = db_session.scalar(select(RefreshToken).where(RefreshToken.token_hash == old_hash))
    assert old_token is not None
    assert old_token.revoked_at is None
    family_id = old_token.family_id

    refresh_resp = client.post("/v1/auth/refresh")
    assert refresh_resp.status_code == 200
    new_raw = client.cookies.get("localconnect_refresh")
    assert new_raw
    assert new_raw != old_raw

    db_session.refresh(old_token)
    assert old_token.revoked_at is not None
    assert old_token.replaced_by is not None
    new_token = db_session.get(RefreshToken, old_token.replaced_by)
    assert new_token is not None
    assert new_token.family_id == family_id


def test_refresh_replay_revokes_family(client: TestClient, db_session):
    register(client, "reg4@example.com")
    login(client, "reg4@example.com")

    old_raw = client.cookies.get("localconnect_refresh")
    assert old_raw

    refresh_resp = client.post("/v1/auth/refresh")
    assert refresh_resp.status_code == 200

    # Replay old token
    replay_resp = client.post("/v1/auth/refresh", json={"refresh_token": old_raw})
    assert replay_resp.status_code == 401

    old_token = db_session.scalar(
        select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(old_raw))
    )
    assert old_token is not None
    family_tokens = db_session.scalars(
        select(RefreshToken).where(RefreshToken.family_id == old_token.family_id)
    ).all()
    assert len(family_tokens) == 2
    assert all(t.revoked_at is not None for t in family_tokens)


def test_logout_revokes_refresh_token(client: TestClient, db_session):
    register(client, "bye@example.com")
    login(client, "bye@example.com")
    raw = client.cookies.get("localconnect_refresh")

    resp = client.post("/v1/auth/logout", json={"refresh_token": raw})
    assert resp.status_code == 200

    token = db_session.scalar(
        select(RefreshToken).where(RefreshToken.token_hash == hash_refresh_token(raw))
    )
    assert token.revoked_at is not None


def test_missing_or_bad_token_is_unauthorized(client: TestClient):
    assert client.get("/v1/me").status_code == 401

    resp = client.get("/v1/me", headers=auth_headers("not-a-jwt"))
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_banned_user_cannot_login_or_use_token(client: TestClient, db_session):
    token = make_user(client, "banned@example.com")
    db_session.execute(
        update(User).where(User.email == "banned@example.com").values(status=UserStatus.BANNED)
    )
    db_session.commit()

    blocked = login(client, "banned@example.com")
    assert blocked.status_code == 403
    assert blocked.json()["detail"]["code"] == "USER_BANNED"
    assert client.get("/v1/me", headers=auth_headers(token)).status_code == 403


def test_rbac_user_blocked_from_admin_route(client: TestClient, db_session):
    register(client, "org@example.com")
    db_session.execute(
        update(User).where(User.email == "org@example.com").values(role=UserRole.ORGANIZER)
    )
    db_session.commit()

    token = login(client, "org@example.com").json()["access_token"]
    admin_list = client.get("/v1/admin/users", headers=auth_headers(token))
    assert admin_list.status_code == 403


def test_rbac_admin_allowed(client: TestClient, db_session):
    token = make_admin(client, db_session, "admin@example.com")

    admin_list = client.get("/v1/admin/users", headers=auth_headers(token))
    assert admin_list.status_code == 200
    assert [u["email"] for u in admin_list.json()] == ["admin@example.com"]


def test_me_profile_update(client: TestClient):
    token = make_user(client, "me@example.com")

    resp = client.patch(
        "/v1/me",
        json={"name": "New Name", "phone_number": "555-000-1111"},
        headers=auth_headers(token),
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "New Name"

    me = client.get("/v1/me", headers=auth_headers(token)).json()
    assert me["phone_number"] == "555-000-1111"
    assert me["status"] == "active"

    empty = client.patch("/v1/me", json={}, headers=auth_headers(token))
    assert empty.status_code == 422
    assert empty.json()["detail"]["code"] == "NO_CHANGES"


def test_access_token_claims(client: TestClient):
    resp = register(client, "claims@example.com")
    claims = verify_access_token(resp.json()["access_token"])
    assert claims["sub"] == resp.json()["user_id"]
    assert claims["role"] == "user"
    assert claims["vo"] is False
