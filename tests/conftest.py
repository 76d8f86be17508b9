# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

import taskboard.models  # noqa: F401
from taskboard.core.database import Base, enable_sqlite_foreign_keys
from taskboard.core.policies import Subject
from taskboard.models import Profile
from taskboard.services import accounts, profiles

from .fakes import RecordingPublisher


@pytest_asyncio.fixture()
async def engine(tmp_path: Path):
    """Fresh SQLite database per test, with foreign keys enforced."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'taskboard.sqlite3'}")
    enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def make_member(db: AsyncSession, email: str, *, admin: bool = False) -> Subject:
    profile = await accounts.create_account(db, email, "secret-password")
    if admin:
        profile.role = "admin"
        await db.commit()
    return await profiles.load_subject(db, profile.id)


@pytest_asyncio.fixture()
async def team(db: AsyncSession) -> SimpleNamespace:
    """An admin and two employees, as request subjects."""
    return SimpleNamespace(
        admin=await make_member(db, "admin@example.com", admin=True),
        alice=await make_member(db, "alice@example.com"),
        bob=await make_member(db, "bob@example.com"),
    )


@pytest.fixture()
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


async def set_profile(db: AsyncSession, subject: Subject, **fields) -> None:
    profile = await db.get(Profile, subject.id)
    for key, value in fields.items():
        setattr(profile, key, value)
    await db.commit()
