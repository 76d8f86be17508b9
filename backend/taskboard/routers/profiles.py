import uuid
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.policies import Subject
from taskboard.routers.auth import get_current_subject
from taskboard.schemas.profile import (
    MemberInvite, MemberInviteResponse, ProfileCreate, ProfileResponse, ProfileUpdate,
)
from taskboard.services import accounts, profiles

router = APIRouter(
    prefix="/profiles",
    tags=["profiles"],
    responses={404: {"description": "Not found"}},
)

@router.get("/", response_model=List[ProfileResponse])
async def get_profiles(
    active_only: bool = False,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.list_profiles(db, subject, active_only=active_only)

@router.post("/me", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_profile(
    profile_in: ProfileCreate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.create_own_profile(db, subject, profile_in.username)

@router.post("/invite", response_model=MemberInviteResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    invite: MemberInvite,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    profile, temporary_password = await accounts.invite_member(
        db, subject, invite.email, invite.username, invite.role
    )
    return MemberInviteResponse(
        profile=ProfileResponse.model_validate(profile),
        temporary_password=temporary_password,
    )

@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.get_profile(db, subject, profile_id)

@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: uuid.UUID,
    changes: ProfileUpdate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await profiles.update_profile(db, subject, profile_id, changes)
