"""Task reads, updates and the soft-delete lifecycle.

Lifecycle: active -> trashed (admin), trashed -> active (admin),
trashed -> purged (admin, irreversible). A task is never purged straight
from active.
"""

import logging
import uuid
from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.database import utcnow
from taskboard.core.errors import InvalidTransition, NotFound
from taskboard.core.policies import Subject, require
from taskboard.models import Task, TaskAssignee
from taskboard.schemas.task import (
    TaskCategory, TaskCreate, TaskPriority, TaskStatus, TaskUpdate,
)

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"due_date"})


def _plain(value):
    if isinstance(value, (TaskStatus, TaskPriority, TaskCategory)):
        return value.value
    return value


async def get_assignee_ids(db: AsyncSession, task_id: uuid.UUID) -> List[uuid.UUID]:
    result = await db.execute(
        select(TaskAssignee.user_id)
        .where(TaskAssignee.task_id == task_id)
        .order_by(TaskAssignee.assigned_at)
    )
    return list(result.scalars().all())


async def assignee_map(db: AsyncSession, task_ids: List[uuid.UUID]) -> Dict[uuid.UUID, List[uuid.UUID]]:
    if not task_ids:
        return {}
    result = await db.execute(
        select(TaskAssignee.task_id, TaskAssignee.user_id)
        .where(TaskAssignee.task_id.in_(task_ids))
        .order_by(TaskAssignee.assigned_at)
    )
    mapping: Dict[uuid.UUID, List[uuid.UUID]] = defaultdict(list)
    for task_id, user_id in result.all():
        mapping[task_id].append(user_id)
    return dict(mapping)


async def list_tasks(
    db: AsyncSession,
    subject: Subject,
    deleted: bool = False,
    assignee_id: Optional[uuid.UUID] = None,
    category: Optional[TaskCategory] = None,
    tag: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
) -> List[Task]:
    """Active tasks newest first, or the trash ordered by deletion time."""
    query = select(Task).where(
        policies.visible_tasks_clause(subject),
        Task.is_deleted.is_(deleted),
    )
    if assignee_id is not None:
        query = query.where(
            Task.id.in_(select(TaskAssignee.task_id).where(TaskAssignee.user_id == assignee_id))
        )
    if category is not None:
        query = query.where(Task.category == category.value)
    if status is not None:
        query = query.where(Task.status == status.value)
    if priority is not None:
        query = query.where(Task.priority == priority.value)

    if deleted:
        query = query.order_by(Task.deleted_at.desc())
    else:
        query = query.order_by(Task.created_at.desc())

    result = await db.execute(query)
    tasks = list(result.scalars().all())
    if tag:
        tasks = [t for t in tasks if tag in (t.tags or [])]
    return tasks


async def get_task(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> Task:
    task = await db.get(Task, task_id)
    if task is None or not policies.can_view_task(subject, task):
        raise NotFound("Task not found")
    return task


async def create_task(db: AsyncSession, subject: Subject, task_in: TaskCreate) -> Task:
    require(policies.can_create_task(subject), subject, "create_task")
    task = Task(
        id=uuid.uuid4(),
        title=task_in.title,
        description=task_in.description,
        status=task_in.status.value,
        priority=task_in.priority.value,
        due_date=task_in.due_date,
        category=task_in.category.value,
        tags=list(task_in.tags),
        created_by=subject.id,
    )
    db.add(task)
    await db.flush()
    for user_id in dict.fromkeys(task_in.assignees):
        db.add(TaskAssignee(task_id=task.id, user_id=user_id))
    await db.commit()
    await db.refresh(task)
    logger.info("task %s created by %s", task.id, subject.id)
    return task


async def update_task(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, changes: TaskUpdate
) -> Task:
    """Admins may change any field; an assignee may send a status-only change."""
    task = await get_task(db, subject, task_id)
    data = {
        field: value
        for field, value in changes.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    assignee_ids = await get_assignee_ids(db, task_id)
    require(
        policies.can_update_task(subject, task, data.keys(), assignee_ids),
        subject,
        "update_task",
    )
    for field, value in data.items():
        setattr(task, field, _plain(value))
    task.updated_at = utcnow()
    await db.commit()
    await db.refresh(task)
    return task


async def update_task_status(
    db: AsyncSession, subject: Subject, task_id: uuid.UUID, status: TaskStatus
) -> Task:
    task = await get_task(db, subject, task_id)
    assignee_ids = await get_assignee_ids(db, task_id)
    require(
        policies.can_update_task_status(subject, task, assignee_ids),
        subject,
        "update_task_status",
    )
    # any status may follow any other; no forward-only ordering
    task.status = status.value
    task.updated_at = utcnow()
    await db.commit()
    await db.refresh(task)
    logger.info("task %s status -> %s by %s", task_id, status.value, subject.id)
    return task


async def soft_delete_task(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> Task:
    task = await get_task(db, subject, task_id)
    require(policies.can_trash_task(subject, task), subject, "trash_task")
    if task.is_deleted:
        raise InvalidTransition("Task is already in the trash")
    now = utcnow()
    task.is_deleted = True
    task.deleted_at = now
    task.updated_at = now
    await db.commit()
    await db.refresh(task)
    logger.info("task %s moved to trash by %s", task_id, subject.id)
    return task


async def restore_task(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> Task:
    task = await get_task(db, subject, task_id)
    require(policies.can_restore_task(subject, task), subject, "restore_task")
    if not task.is_deleted:
        raise InvalidTransition("Task is not in the trash")
    task.is_deleted = False
    task.deleted_at = None
    task.updated_at = utcnow()
    await db.commit()
    await db.refresh(task)
    logger.info("task %s restored by %s", task_id, subject.id)
    return task


async def purge_task(db: AsyncSession, subject: Subject, task_id: uuid.UUID) -> None:
    """Permanently remove a trashed task; assignees, comments and attachments cascade."""
    task = await get_task(db, subject, task_id)
    require(policies.can_purge_task(subject, task), subject, "purge_task")
    if not task.is_deleted:
        raise InvalidTransition("Only tasks in the trash can be permanently deleted")
    await db.execute(delete(Task).where(Task.id == task_id))
    await db.commit()
    logger.info("task %s purged by %s", task_id, subject.id)
