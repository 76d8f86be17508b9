import uuid
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core import policies
from taskboard.core.policies import Subject
from taskboard.models import Profile, Task, TaskAssignee, TaskComment
from taskboard.schemas.comment import ActivityItem
from taskboard.schemas.task import PriorityBreakdown, TaskStats, TaskStatus, UpcomingTask

DONE = TaskStatus.done.value


async def _live_tasks(db: AsyncSession, subject: Subject) -> List[Task]:
    result = await db.execute(
        select(Task).where(policies.visible_tasks_clause(subject), Task.is_deleted.is_(False))
    )
    return list(result.scalars().all())


async def task_stats(db: AsyncSession, subject: Subject, today: Optional[date] = None) -> TaskStats:
    """Counters over non-deleted tasks; open means any status except done."""
    today = today or date.today()
    tasks = await _live_tasks(db, subject)
    open_tasks = [t for t in tasks if t.status != DONE]

    by_priority: Dict[str, int] = {"low": 0, "medium": 0, "high": 0}
    for task in open_tasks:
        by_priority[task.priority] += 1

    return TaskStats(
        total_tasks=len(tasks),
        overdue_tasks=sum(1 for t in open_tasks if t.due_date and t.due_date < today),
        due_today_tasks=sum(1 for t in open_tasks if t.due_date == today),
        completed_tasks=len(tasks) - len(open_tasks),
        open_by_priority=PriorityBreakdown(**by_priority),
    )


async def upcoming_tasks(db: AsyncSession, subject: Subject, limit: int = 5) -> List[UpcomingTask]:
    result = await db.execute(
        select(Task)
        .where(
            policies.visible_tasks_clause(subject),
            Task.is_deleted.is_(False),
            Task.due_date.is_not(None),
            Task.status != DONE,
        )
        .order_by(Task.due_date.asc())
        .limit(limit)
    )
    tasks = list(result.scalars().all())
    if not tasks:
        return []

    names: Dict[uuid.UUID, List[str]] = {t.id: [] for t in tasks}
    rows = await db.execute(
        select(TaskAssignee.task_id, Profile.username)
        .join(Profile, Profile.id == TaskAssignee.user_id)
        .where(TaskAssignee.task_id.in_(list(names)), policies.visible_profiles_clause(subject))
        .order_by(TaskAssignee.assigned_at)
    )
    for task_id, username in rows.all():
        names[task_id].append(username)

    return [
        UpcomingTask(
            id=t.id,
            title=t.title,
            status=t.status,
            priority=t.priority,
            due_date=t.due_date,
            assignees=names[t.id],
        )
        for t in tasks
    ]


async def recent_activity(db: AsyncSession, subject: Subject, limit: int = 10) -> List[ActivityItem]:
    """Latest comments on live tasks, newest first."""
    rows = await db.execute(
        select(TaskComment, Task.title, Profile.username)
        .join(Task, policies.visible_children_clause(TaskComment.task_id))
        .outerjoin(
            Profile,
            and_(Profile.id == TaskComment.user_id, policies.visible_profiles_clause(subject)),
        )
        .order_by(TaskComment.created_at.desc())
        .limit(limit)
    )
    return [
        ActivityItem(
            id=comment.id,
            task_id=comment.task_id,
            task_title=title,
            username=username,
            content=comment.content,
            created_at=comment.created_at,
        )
        for comment, title, username in rows.all()
    ]
