import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.errors import NotFound
from taskboard.core.policies import Subject, require
from taskboard.models import Task, TaskComment

logger = logging.getLogger(__name__)


async def _live_parent(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> Task:
    task = await db.get(Task, task_id)
    if task is None or not policies.can_view_task_children(subject, task):
        raise NotFound("Task not found")
    return task


async def get_comment(db: AsyncSession, subject: Subject, comment_id: uuid.UUID) -> TaskComment:
    result = await db.execute(
        select(TaskComment)
        .join(Task, policies.visible_children_clause(TaskComment.task_id))
        .where(TaskComment.id == comment_id)
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFound("Comment not found")
    return comment


async def list_comments(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> List[TaskComment]:
    await _live_parent(db, subject, task_id)
    result = await db.execute(
        select(TaskComment)
        .where(TaskComment.task_id == task_id)
        .order_by(TaskComment.created_at)
    )
    return list(result.scalars().all())


async def add_comment(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, content: str
) -> TaskComment:
    task = await _live_parent(db, subject, task_id)
    require(policies.can_add_task_child(subject, task), subject, "add_comment")
    comment = TaskComment(id=uuid.uuid4(), task_id=task_id, user_id=subject.id, content=content)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def update_comment(
    db: AsyncSession, subject: Subject, comment_id: uuid.UUID, content: str
) -> TaskComment:
    comment = await get_comment(db, subject, comment_id)
    require(policies.can_edit_comment(subject, comment), subject, "update_comment")
    comment.content = content
    await db.commit()
    await db.refresh(comment)
    return comment


async def delete_comment(db: AsyncSession, subject: Subject, comment_id: uuid.UUID) -> None:
    comment = await get_comment(db, subject, comment_id)
    require(policies.can_delete_comment(subject, comment), subject, "delete_comment")
    await db.execute(delete(TaskComment).where(TaskComment.id == comment_id))
    await db.commit()
    logger.info("comment %s deleted by %s", comment_id, subject.id)
