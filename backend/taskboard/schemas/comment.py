from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)

class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1)

class CommentResponse(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: Optional[uuid.UUID]
    content: str
    created_at: datetime

    class Config:
        from_attributes = True

class ActivityItem(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    task_title: str
    username: Optional[str]
    content: str
    created_at: datetime
