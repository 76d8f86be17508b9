import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.database import utcnow
from taskboard.core.errors import Conflict, NotFound
from taskboard.core.policies import Subject, require
from taskboard.models import Profile
from taskboard.schemas.profile import ProfileStatus, ProfileUpdate, Role

logger = logging.getLogger(__name__)


async def load_subject(db: AsyncSession, account_id: uuid.UUID) -> Subject:
    """Build the request subject; role is looked up fresh on every call."""
    profile = await db.get(Profile, account_id)
    if profile is None:
        return Subject(id=account_id)
    return Subject.from_profile(profile)


async def list_profiles(db: AsyncSession, subject: Subject, active_only: bool = False) -> List[Profile]:
    query = select(Profile).where(policies.visible_profiles_clause(subject))
    if active_only:
        query = query.where(Profile.status == ProfileStatus.active.value)
    result = await db.execute(query.order_by(Profile.created_at.desc()))
    return list(result.scalars().all())


async def get_profile(db: AsyncSession, subject: Subject, profile_id: uuid.UUID) -> Profile:
    profile = await db.get(Profile, profile_id)
    if profile is None or not policies.can_view_profile(subject, profile):
        raise NotFound("Profile not found")
    return profile


async def create_own_profile(db: AsyncSession, subject: Subject, username: str) -> Profile:
    require(policies.can_insert_profile(subject, subject.id), subject, "insert_profile")
    if await db.get(Profile, subject.id) is not None:
        raise Conflict("Profile already exists")
    profile = Profile(
        id=subject.id,
        username=username,
        role=Role.employee.value,
        status=ProfileStatus.active.value,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(
    db: AsyncSession, subject: Subject, profile_id: uuid.UUID, changes: ProfileUpdate
) -> Profile:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise NotFound("Profile not found")
    data = changes.model_dump(exclude_unset=True, exclude_none=True)
    require(policies.can_update_profile(subject, profile, data.keys()), subject, "update_profile")

    for field, value in data.items():
        setattr(profile, field, value.value if isinstance(value, (Role, ProfileStatus)) else value)
    # updated_at moves on every UPDATE, even one that changes nothing else
    profile.updated_at = utcnow()
    await db.commit()
    await db.refresh(profile)
    logger.info("profile %s updated by %s: %s", profile_id, subject.id, sorted(data))
    return profile
