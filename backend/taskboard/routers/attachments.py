import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.policies import Subject
from taskboard.routers.auth import get_current_subject
from taskboard.schemas.attachment import AttachmentCreate, AttachmentResponse
from taskboard.services import attachments

router = APIRouter(tags=["attachments"], responses={404: {"description": "Not found"}})

@router.get("/tasks/{task_id}/attachments", response_model=List[AttachmentResponse])
async def get_attachments(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await attachments.list_attachments(db, subject, task_id)

@router.post("/tasks/{task_id}/attachments", response_model=AttachmentResponse, status_code=status.HTTP_201_CREATED)
async def add_attachment(
    task_id: uuid.UUID,
    attachment_in: AttachmentCreate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await attachments.add_attachment(
        db, subject, task_id,
        attachment_in.file_name,
        attachment_in.file_url,
        attachment_in.file_type,
    )

@router.delete("/attachments/{attachment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attachment(
    attachment_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    await attachments.delete_attachment(db, subject, attachment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
