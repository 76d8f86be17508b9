import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.events import ActivityPublisher, get_publisher
from taskboard.core.policies import Subject
from taskboard.routers.auth import get_current_subject
from taskboard.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from taskboard.services import comments

router = APIRouter(tags=["comments"], responses={404: {"description": "Not found"}})

@router.get("/tasks/{task_id}/comments", response_model=List[CommentResponse])
async def get_comments(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await comments.list_comments(db, subject, task_id)

@router.post("/tasks/{task_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    task_id: uuid.UUID,
    comment_in: CommentCreate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    comment = await comments.add_comment(db, subject, task_id, comment_in.content)
    await publisher.publish(
        "comment_added", task_id=str(task_id), comment_id=str(comment.id), actor=str(subject.id)
    )
    return comment

@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: uuid.UUID,
    comment_in: CommentUpdate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await comments.update_comment(db, subject, comment_id, comment_in.content)

@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    await comments.delete_comment(db, subject, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
