from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum
import uuid

class Role(str, Enum):
    admin = "admin"
    employee = "employee"

class ProfileStatus(str, Enum):
    active = "active"
    disabled = "disabled"

class ProfileCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)

class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[Role] = None
    status: Optional[ProfileStatus] = None

class ProfileResponse(BaseModel):
    id: uuid.UUID
    username: str
    role: Role
    status: ProfileStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class MemberInvite(BaseModel):
    email: str
    username: str = Field(..., min_length=1, max_length=100)
    role: Role = Role.employee

class MemberInviteResponse(BaseModel):
    profile: ProfileResponse
    temporary_password: str
