"""Account provisioning and credentials.

``create_account`` plays the part of a database trigger: it inserts the
profile row on behalf of an account that cannot yet satisfy the profile
insert rule, so it performs no authorization check.
"""

import logging
import secrets
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.errors import NotFound, TaskboardError
from taskboard.core.policies import Subject, require
from taskboard.core.security import get_password_hash, verify_password
from taskboard.models import Account, Profile
from taskboard.schemas.profile import ProfileStatus, Role

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class InvalidCredentials(TaskboardError):
    detail = "Incorrect email or password"


def default_username(account_id: uuid.UUID, email: Optional[str]) -> str:
    return email or f"user_{account_id}"


async def _provision(
    db: AsyncSession,
    email: Optional[str],
    password: str,
    username: Optional[str] = None,
) -> Profile:
    """Stage an account and its employee profile without committing."""
    account = Account(id=uuid.uuid4(), email=email, hashed_password=get_password_hash(password))
    profile = Profile(
        id=account.id,
        username=username or default_username(account.id, email),
        role=Role.employee.value,
        status=ProfileStatus.active.value,
    )
    db.add(account)
    await db.flush()
    db.add(profile)
    return profile


async def create_account(
    db: AsyncSession,
    email: Optional[str],
    password: str,
    username: Optional[str] = None,
) -> Profile:
    """Create an account and its employee profile in one transaction."""
    profile = await _provision(db, email, password, username)
    await db.commit()
    await db.refresh(profile)
    logger.info("provisioned account %s (%s)", profile.id, profile.username)
    return profile


async def authenticate(db: AsyncSession, email: str, password: str) -> Account:
    result = await db.execute(select(Account).where(Account.email == email))
    account = result.scalar_one_or_none()
    if account is None or not verify_password(password, account.hashed_password):
        raise InvalidCredentials()
    return account


async def change_password(
    db: AsyncSession, subject: Subject, current_password: str, new_password: str
) -> None:
    account = await db.get(Account, subject.id)
    if account is None:
        raise NotFound("Account not found")
    if not verify_password(current_password, account.hashed_password):
        raise InvalidCredentials("Current password is incorrect")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise TaskboardError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    account.hashed_password = get_password_hash(new_password)
    await db.commit()


async def invite_member(
    db: AsyncSession, subject: Subject, email: str, username: str, role: Role
) -> tuple[Profile, str]:
    """Admin creates a teammate's account; returns the profile and a temporary password."""
    require(subject.is_admin, subject, "invite_member")
    temporary_password = secrets.token_urlsafe(12)
    profile = await _provision(db, email, temporary_password, username)
    profile.role = role.value
    # account and profile commit together or not at all
    await db.commit()
    await db.refresh(profile)
    logger.info("subject %s invited %s as %s", subject.id, username, role.value)
    return profile, temporary_password
