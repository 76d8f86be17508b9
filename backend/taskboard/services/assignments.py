import logging
import uuid
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.errors import NotFound
from taskboard.core.policies import Subject, require
from taskboard.models import Task, TaskAssignee

logger = logging.getLogger(__name__)


async def _existing_task(db: AsyncSession, task_id: uuid.UUID) -> Task:
    # assignment rules do not depend on the task's deletion state
    task = await db.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


async def list_assignees(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> List[TaskAssignee]:
    require(policies.can_view_assignments(subject), subject, "list_assignees")
    result = await db.execute(
        select(TaskAssignee)
        .where(TaskAssignee.task_id == task_id)
        .order_by(TaskAssignee.assigned_at)
    )
    return list(result.scalars().all())


async def add_assignee(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, user_id: uuid.UUID
) -> TaskAssignee:
    """Link a profile to a task; a duplicate pair violates the unique constraint."""
    require(policies.can_manage_assignments(subject), subject, "add_assignee")
    await _existing_task(db, task_id)
    assignment = TaskAssignee(task_id=task_id, user_id=user_id)
    db.add(assignment)
    await db.commit()
    await db.refresh(assignment)
    logger.info("user %s assigned to task %s", user_id, task_id)
    return assignment


async def remove_assignee(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, user_id: uuid.UUID
) -> None:
    require(policies.can_manage_assignments(subject), subject, "remove_assignee")
    result = await db.execute(
        delete(TaskAssignee).where(
            TaskAssignee.task_id == task_id, TaskAssignee.user_id == user_id
        )
    )
    if result.rowcount == 0:
        raise NotFound("Assignment not found")
    await db.commit()


async def set_assignees(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, user_ids: List[uuid.UUID]
) -> List[TaskAssignee]:
    """Replace the whole assignee set of a task."""
    require(policies.can_manage_assignments(subject), subject, "set_assignees")
    await _existing_task(db, task_id)
    await db.execute(delete(TaskAssignee).where(TaskAssignee.task_id == task_id))
    for user_id in dict.fromkeys(user_ids):
        db.add(TaskAssignee(task_id=task_id, user_id=user_id))
    await db.commit()
    return await list_assignees(db, subject, task_id)
