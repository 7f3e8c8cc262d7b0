"""Tests for account management by administrators."""

import pytest
import pytest_asyncio

from helpbox.config import AccessLevel
from helpbox.infrastructure.database import get_session_context
from helpbox.users.infrastructure import SQLAlchemyUserRepository

NEW_USER = {
    "first_name": "Bruno",
    "last_name": "Lima",
    "email": "bruno.lima@empresa.com.br",
    "password": "senha-inicial",
    "job_title": "Analista",
    "department": "Compras",
    "access_level": 2,
}


@pytest_asyncio.fixture
async def admin(make_user, login):
    user = await make_user(access_level=AccessLevel.ADMIN, first_name="Zeca", email="admin@empresa.com.br")
    return await login(user)


@pytest.mark.asyncio
async def test_create_user_returns_id_and_allows_login(admin, client):
    resp = await admin.post("/users", json=NEW_USER)

    assert resp.status_code == 201
    new_id = resp.json()["id"]
    assert isinstance(new_id, int)

    resp = await client.post("/auth/login", json={"email": NEW_USER["email"], "password": "senha-inicial"})
    assert resp.status_code == 200
    assert resp.json()["access_level"] == 2


@pytest.mark.asyncio
async def test_duplicate_email_is_409(admin):
    assert (await admin.post("/users", json=NEW_USER)).status_code == 201

    resp = await admin.post("/users", json={**NEW_USER, "email": "Bruno.Lima@empresa.com.br"})

    assert resp.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["first_name", "email", "password", "department"])
async def test_create_requires_fields(admin, missing):
    body = {k: v for k, v in NEW_USER.items() if k != missing}
    resp = await admin.post("/users", json=body)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_create_rejects_unknown_access_level(admin):
    resp = await admin.post("/users", json={**NEW_USER, "access_level": 7})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_list_users_is_sorted_and_hides_hashes(admin, make_user):
    await make_user(first_name="Marta")
    await make_user(first_name="Bia")

    resp = await admin.get("/users")

    assert resp.status_code == 200
    users = resp.json()
    assert [u["first_name"] for u in users] == ["Bia", "Marta", "Zeca"]
    assert all("password_hash" not in u and "password" not in u for u in users)


@pytest.mark.asyncio
async def test_update_with_blank_password_keeps_old_hash(admin, make_user, client):
    user = await make_user(email="carla@empresa.com.br")

    resp = await admin.put(f"/users/{user.id}", json={
        "first_name": "Carla",
        "email": "carla@empresa.com.br",
        "password": "   ",
        "department": "Jurídico",
        "access_level": 2,
    })

    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    async with get_session_context() as db:
        stored = await SQLAlchemyUserRepository(db).get_by_id(user.id)
    assert stored.password_hash == user.password_hash
    assert stored.department == "Jurídico"
    assert stored.access_level == AccessLevel.TECHNICIAN


@pytest.mark.asyncio
async def test_update_with_new_password(admin, make_user, client):
    user = await make_user(email="davi@empresa.com.br")

    resp = await admin.put(f"/users/{user.id}", json={
        "first_name": "Davi",
        "email": "davi@empresa.com.br",
        "password": "nova-senha",
        "department": "TI",
    })
    assert resp.status_code == 200

    login_resp = await client.post("/auth/login", json={"email": "davi@empresa.com.br", "password": "nova-senha"})
    assert login_resp.status_code == 200


@pytest.mark.asyncio
async def test_update_missing_user_is_404(admin):
    resp = await admin.put("/users/9999", json={
        "first_name": "X",
        "email": "x@empresa.com.br",
        "department": "TI",
    })
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_user(admin, make_user):
    user = await make_user()

    resp = await admin.delete(f"/users/{user.id}")

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "deleted_id": user.id}
    assert (await admin.delete(f"/users/{user.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_user_with_tickets_is_409(admin, make_user, login):
    user = await make_user()
    session = await login(user)
    resp = await session.post("/tickets", json={
        "title": "Mouse falhando",
        "category": "Hardware",
        "description": "O clique esquerdo não funciona às vezes.",
    })
    assert resp.status_code == 201

    resp = await admin.delete(f"/users/{user.id}")

    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_deleting_user_ends_their_sessions(admin, make_user, login):
    user = await make_user()
    session = await login(user)

    assert (await admin.delete(f"/users/{user.id}")).status_code == 200

    assert (await session.get("/auth/me")).status_code == 401
