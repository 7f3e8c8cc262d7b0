"""Tests for login sessions and access checks."""

from datetime import datetime, timedelta, timezone

import pytest

from helpbox.config import AccessLevel, settings
from helpbox.infrastructure.database import get_session_context
from helpbox.shared.auth import hash_password, verify_password
from helpbox.users.application import digest_token
from helpbox.users.domain import PLACEHOLDER
from helpbox.users.infrastructure import SQLAlchemySessionRepository, SessionModel

from tests.conftest import DEFAULT_PASSWORD


@pytest.mark.asyncio
async def test_login_sets_http_only_cookie(client, make_user):
    user = await make_user(access_level=AccessLevel.TECHNICIAN)

    resp = await client.post("/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Login successful", "access_level": 2}
    set_cookie = resp.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.session_cookie_name}=")
    assert "httponly" in set_cookie.lower()


@pytest.mark.asyncio
async def test_login_trims_credentials(client, make_user):
    user = await make_user(email="maria@empresa.com.br")

    resp = await client.post(
        "/auth/login",
        json={"email": "  Maria@Empresa.com.br ", "password": f"  {DEFAULT_PASSWORD}  "}
    )

    assert resp.status_code == 200
    assert user.email == "maria@empresa.com.br"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"email": "a@empresa.com.br"}, {"password": "x"}, {"email": " ", "password": " "}])
async def test_login_missing_fields_is_400(client, database, body):
    resp = await client.post("/auth/login", json=body)

    assert resp.status_code == 400
    assert "correlation_id" in resp.json()


@pytest.mark.asyncio
async def test_login_wrong_password_is_401(client, make_user):
    user = await make_user()

    resp = await client.post("/auth/login", json={"email": user.email, "password": "errada"})

    assert resp.status_code == 401
    assert settings.session_cookie_name not in resp.cookies


@pytest.mark.asyncio
async def test_login_unknown_email_is_401(client, database):
    resp = await client.post("/auth/login", json={"email": "ninguem@empresa.com.br", "password": "x"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_profile_with_placeholders(make_user, login):
    user = await make_user(first_name="Carlos", last_name=None, job_title=None)
    session = await login(user)

    resp = await session.get("/auth/me")

    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == user.id
    assert data["first_name"] == "Carlos"
    assert data["last_name"] == PLACEHOLDER
    assert data["job_title"] == PLACEHOLDER
    assert data["email"] == user.email
    assert data["access_level"] == 1


@pytest.mark.asyncio
async def test_me_without_cookie_is_401(client, database):
    resp = await client.get("/auth/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_me_with_unknown_token_is_401(client, database):
    client.cookies.set(settings.session_cookie_name, "forged-token")
    resp = await client.get("/auth/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_logout_invalidates_session(make_user, login):
    user = await make_user()
    session = await login(user)

    resp = await session.post("/auth/logout")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}

    resp = await session.get("/auth/me")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_only_token_digest_is_stored(make_user, login):
    user = await make_user()
    session = await login(user)
    token = session.cookies[settings.session_cookie_name]

    async with get_session_context() as db:
        stored = await db.get(SessionModel, digest_token(token))
        raw = await db.get(SessionModel, token)

    assert stored is not None
    assert stored.user_id == user.id
    assert raw is None


@pytest.mark.asyncio
async def test_expired_session_is_rejected(client, make_user):
    from helpbox.users.domain import LoginSession

    user = await make_user()
    now = datetime.now(timezone.utc)
    async with get_session_context() as db:
        await SQLAlchemySessionRepository(db).create(
            digest_token("old-token"),
            LoginSession(user_id=user.id, created_at=now - timedelta(days=2), expires_at=now - timedelta(days=1))
        )

    client.cookies.set(settings.session_cookie_name, "old-token")
    resp = await client.get("/auth/me")

    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_client_cannot_reach_admin_routes(make_user, login):
    user = await make_user(access_level=AccessLevel.CLIENT)
    session = await login(user)

    resp = await session.get("/users")

    assert resp.status_code == 403


def test_password_hashing_trims_and_verifies():
    hashed = hash_password(" segredo ", rounds=4)

    assert verify_password("segredo", hashed)
    assert verify_password("segredo", hashed + "   ")
    assert not verify_password("outra", hashed)
    assert not verify_password("segredo", "not-a-bcrypt-hash")
