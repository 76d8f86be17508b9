# tests/test_api.py

from __future__ import annotations

import uuid
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from taskboard.core.database import get_db
from taskboard.core.events import get_publisher
from taskboard.core.security import create_access_token
from taskboard.main import app
from taskboard.models import Profile

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture()
async def client(session_factory, publisher):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_publisher] = lambda: publisher
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def signup(client: AsyncClient, email: str) -> dict:
    resp = await client.post("/auth/signup", json={"email": email, "password": "secret-pw"})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def me(client: AsyncClient, headers: dict) -> dict:
    resp = await client.get("/auth/me", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest_asyncio.fixture()
async def users(client, session_factory):
    admin = await signup(client, "admin@example.com")
    alice = await signup(client, "alice@example.com")
    bob = await signup(client, "bob@example.com")

    admin_id = uuid.UUID((await me(client, admin))["id"])
    async with session_factory() as session:
        profile = await session.get(Profile, admin_id)
        profile.role = "admin"
        await session.commit()

    return {
        "admin": admin,
        "alice": alice,
        "bob": bob,
        "alice_id": (await me(client, alice))["id"],
        "bob_id": (await me(client, bob))["id"],
    }


async def create_report(client, users) -> dict:
    resp = await client.post(
        "/tasks/",
        headers=users["admin"],
        json={"title": "Write report", "priority": "high", "assignees": [users["alice_id"]]},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_signup_provisions_employee_and_login_works(client) -> None:
    headers = await signup(client, "erin@example.com")
    profile = await me(client, headers)
    assert profile["role"] == "employee"
    assert profile["status"] == "active"
    assert profile["username"] == "erin@example.com"

    resp = await client.post(
        "/auth/token", data={"username": "erin@example.com", "password": "secret-pw"}
    )
    assert resp.status_code == 200
    assert resp.json()["token_type"] == "bearer"

    resp = await client.post("/auth/token", data={"username": "erin@example.com", "password": "nope"})
    assert resp.status_code == 401


async def test_requests_without_valid_token_are_rejected(client) -> None:
    assert (await client.get("/tasks/")).status_code == 401
    resp = await client.get("/tasks/", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_write_report_scenario(client, users, publisher) -> None:
    task = await create_report(client, users)
    assert task["assignee_ids"] == [users["alice_id"]]
    assert task["status"] == "to_do"

    resp = await client.patch(
        f"/tasks/{task['id']}/status", headers=users["alice"], json={"status": "in_progress"}
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "in_progress"

    resp = await client.patch(
        f"/tasks/{task['id']}/status", headers=users["bob"], json={"status": "in_progress"}
    )
    assert resp.status_code == 403
    assert resp.json() == {"detail": "Access denied"}

    resp = await client.patch(f"/tasks/{task['id']}", headers=users["alice"], json={"title": "Mine now"})
    assert resp.status_code == 403

    assert publisher.types() == ["task_created", "task_status_changed"]


async def test_trash_scenario(client, users) -> None:
    task = await create_report(client, users)

    resp = await client.delete(f"/tasks/{task['id']}", headers=users["alice"])
    assert resp.status_code == 403

    resp = await client.delete(f"/tasks/{task['id']}", headers=users["admin"])
    assert resp.status_code == 200
    assert resp.json()["is_deleted"] is True
    assert resp.json()["deleted_at"] is not None

    listed = (await client.get("/tasks/", headers=users["alice"])).json()
    assert task["id"] not in [t["id"] for t in listed]
    assert (await client.get("/tasks/?deleted=true", headers=users["alice"])).json() == []
    assert (await client.get(f"/tasks/{task['id']}", headers=users["alice"])).status_code == 404

    trash = (await client.get("/tasks/?deleted=true", headers=users["admin"])).json()
    assert [t["id"] for t in trash] == [task["id"]]
    assert trash[0]["deleted_at"] is not None

    resp = await client.post(f"/tasks/{task['id']}/restore", headers=users["admin"])
    assert resp.status_code == 200
    assert resp.json()["is_deleted"] is False
    assert resp.json()["deleted_at"] is None


async def test_purge_requires_trash(client, users) -> None:
    task = await create_report(client, users)

    resp = await client.delete(f"/tasks/{task['id']}/purge", headers=users["admin"])
    assert resp.status_code == 409

    await client.delete(f"/tasks/{task['id']}", headers=users["admin"])
    resp = await client.delete(f"/tasks/{task['id']}/purge", headers=users["admin"])
    assert resp.status_code == 204
    assert (await client.get(f"/tasks/{task['id']}", headers=users["admin"])).status_code == 404


async def test_comment_hidden_after_trash(client, users) -> None:
    task = await create_report(client, users)
    resp = await client.post(
        f"/tasks/{task['id']}/comments", headers=users["alice"], json={"content": "Drafting now"}
    )
    assert resp.status_code == 201
    comment = resp.json()

    await client.delete(f"/tasks/{task['id']}", headers=users["admin"])

    resp = await client.get(f"/tasks/{task['id']}/comments", headers=users["alice"])
    assert resp.status_code == 404
    resp = await client.patch(
        f"/comments/{comment['id']}", headers=users["alice"], json={"content": "edited"}
    )
    assert resp.status_code == 404
    activity = (await client.get("/dashboard/activity", headers=users["alice"])).json()
    assert activity == []


async def test_duplicate_assignee_is_a_constraint_conflict(client, users) -> None:
    task = await create_report(client, users)
    resp = await client.post(
        f"/tasks/{task['id']}/assignees", headers=users["admin"], json={"user_id": users["alice_id"]}
    )
    assert resp.status_code == 409
    assert "UNIQUE" in resp.json()["detail"].upper()

    resp = await client.put(
        f"/tasks/{task['id']}/assignees",
        headers=users["admin"],
        json={"user_ids": [users["bob_id"]]},
    )
    assert resp.status_code == 200
    assert [a["user_id"] for a in resp.json()] == [users["bob_id"]]


async def test_profile_rules_over_http(client, users) -> None:
    resp = await client.patch(
        f"/profiles/{users['alice_id']}", headers=users["alice"], json={"role": "admin"}
    )
    assert resp.status_code == 403

    resp = await client.patch(
        f"/profiles/{users['bob_id']}", headers=users["admin"], json={"status": "disabled"}
    )
    assert resp.status_code == 200

    visible = [p["id"] for p in (await client.get("/profiles/", headers=users["alice"])).json()]
    assert users["bob_id"] not in visible
    assert (await me(client, users["bob"]))["status"] == "disabled"


async def test_invite_and_dashboard(client, users) -> None:
    resp = await client.post(
        "/profiles/invite",
        headers=users["admin"],
        json={"email": "finn@example.com", "username": "finn", "role": "employee"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["profile"]["username"] == "finn"

    resp = await client.post(
        "/auth/token",
        data={"username": "finn@example.com", "password": body["temporary_password"]},
    )
    assert resp.status_code == 200

    await create_report(client, users)
    stats = (await client.get("/dashboard/stats", headers=users["bob"])).json()
    assert stats["total_tasks"] == 1
    assert stats["open_by_priority"]["high"] == 1


async def test_invalid_enum_is_rejected(client, users) -> None:
    task = await create_report(client, users)
    resp = await client.patch(
        f"/tasks/{task['id']}/status", headers=users["alice"], json={"status": "blocked"}
    )
    assert resp.status_code == 422


async def test_database_outage_is_a_generic_503(client, tmp_path: Path) -> None:
    broken = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite3'}")
    broken_sessions = sessionmaker(broken, class_=AsyncSession, expire_on_commit=False)

    async def broken_db():
        async with broken_sessions() as session:
            yield session

    app.dependency_overrides[get_db] = broken_db
    token = create_access_token({"sub": str(uuid.uuid4())})
    resp = await client.get("/tasks/", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 503
    assert "temporarily unavailable" in resp.json()["detail"]
    await broken.dispose()
