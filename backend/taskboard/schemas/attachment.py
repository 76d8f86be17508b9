from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid

class AttachmentCreate(BaseModel):
    file_name: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)
    file_type: Optional[str] = None

class AttachmentResponse(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    file_name: str
    file_url: str
    file_type: Optional[str]
    uploaded_by: Optional[uuid.UUID]
    created_at: datetime

    class Config:
        from_attributes = True
