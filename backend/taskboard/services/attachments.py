import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.errors import NotFound
from taskboard.core.policies import Subject, require
from taskboard.models import Task, TaskAttachment

logger = logging.getLogger(__name__)


async def _live_parent(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> Task:
    task = await db.get(Task, task_id)
    if task is None or not policies.can_view_task_children(subject, task):
        raise NotFound("Task not found")
    return task


async def list_attachments(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> List[TaskAttachment]:
    await _live_parent(db, subject, task_id)
    result = await db.execute(
        select(TaskAttachment)
        .where(TaskAttachment.task_id == task_id)
        .order_by(TaskAttachment.created_at)
    )
    return list(result.scalars().all())


async def add_attachment(
    db: AsyncSession,
    subject: Subject,
    task_id: uuid.UUID,
    file_name: str,
    file_url: str,
    file_type: Optional[str] = None,
) -> TaskAttachment:
    task = await _live_parent(db, subject, task_id)
    require(policies.can_add_task_child(subject, task), subject, "add_attachment")
    attachment = TaskAttachment(
        id=uuid.uuid4(),
        task_id=task_id,
        file_name=file_name,
        file_url=file_url,
        file_type=file_type,
        uploaded_by=subject.id,
    )
    db.add(attachment)
    await db.commit()
    await db.refresh(attachment)
    return attachment


async def delete_attachment(db: AsyncSession, subject: Subject, attachment_id: uuid.UUID) -> None:
    result = await db.execute(
        select(TaskAttachment)
        .join(Task, policies.visible_children_clause(TaskAttachment.task_id))
        .where(TaskAttachment.id == attachment_id)
    )
    attachment = result.scalar_one_or_none()
    if attachment is None:
        raise NotFound("Attachment not found")
    require(policies.can_delete_attachment(subject, attachment), subject, "delete_attachment")
    await db.execute(delete(TaskAttachment).where(TaskAttachment.id == attachment_id))
    await db.commit()
    logger.info("attachment %s deleted by %s", attachment_id, subject.id)
