import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.events import ActivityPublisher, get_publisher
from taskboard.core.policies import Subject
from taskboard.models import Task
from taskboard.routers.auth import get_current_subject
from taskboard.schemas.task import (
    AssigneeAdd, AssigneeResponse, AssigneeSet, TaskCategory, TaskCreate, TaskPriority,
    TaskResponse, TaskStatus, TaskStatusUpdate, TaskUpdate,
)
from taskboard.services import assignments, tasks

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={404: {"description": "Not found"}},
)

def _to_response(task: Task, assignee_ids: List[uuid.UUID]) -> TaskResponse:
    return TaskResponse.model_validate(task).model_copy(update={"assignee_ids": assignee_ids})

async def _with_assignees(db: AsyncSession, task: Task) -> TaskResponse:
    return _to_response(task, await tasks.get_assignee_ids(db, task.id))

@router.get("/", response_model=List[TaskResponse])
async def get_tasks(
    deleted: bool = False,
    assignee: Optional[uuid.UUID] = None,
    category: Optional[TaskCategory] = None,
    tag: Optional[str] = None,
    task_status: Optional[TaskStatus] = Query(None, alias="status"),
    priority: Optional[TaskPriority] = None,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    found = await tasks.list_tasks(
        db, subject,
        deleted=deleted,
        assignee_id=assignee,
        category=category,
        tag=tag,
        status=task_status,
        priority=priority,
    )
    by_task = await tasks.assignee_map(db, [t.id for t in found])
    return [_to_response(t, by_task.get(t.id, [])) for t in found]

@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    task = await tasks.create_task(db, subject, task_in)
    await publisher.publish("task_created", task_id=str(task.id), title=task.title, actor=str(subject.id))
    return await _with_assignees(db, task)

@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await _with_assignees(db, await tasks.get_task(db, subject, task_id))

@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: uuid.UUID,
    changes: TaskUpdate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    task = await tasks.update_task(db, subject, task_id, changes)
    await publisher.publish(
        "task_updated",
        task_id=str(task.id),
        fields=sorted(changes.model_dump(exclude_unset=True)),
        actor=str(subject.id),
    )
    return await _with_assignees(db, task)

@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: uuid.UUID,
    status_in: TaskStatusUpdate,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    task = await tasks.update_task_status(db, subject, task_id, status_in.status)
    await publisher.publish(
        "task_status_changed", task_id=str(task.id), status=task.status, actor=str(subject.id)
    )
    return await _with_assignees(db, task)

@router.delete("/{task_id}", response_model=TaskResponse)
async def trash_task(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    task = await tasks.soft_delete_task(db, subject, task_id)
    await publisher.publish("task_trashed", task_id=str(task.id), actor=str(subject.id))
    return await _with_assignees(db, task)

@router.post("/{task_id}/restore", response_model=TaskResponse)
async def restore_task(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    task = await tasks.restore_task(db, subject, task_id)
    await publisher.publish("task_restored", task_id=str(task.id), actor=str(subject.id))
    return await _with_assignees(db, task)

@router.delete("/{task_id}/purge", status_code=status.HTTP_204_NO_CONTENT)
async def purge_task(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
    publisher: ActivityPublisher = Depends(get_publisher),
):
    await tasks.purge_task(db, subject, task_id)
    await publisher.publish("task_purged", task_id=str(task_id), actor=str(subject.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# Assignees

@router.get("/{task_id}/assignees", response_model=List[AssigneeResponse])
async def get_assignees(
    task_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await assignments.list_assignees(db, subject, task_id)

@router.post("/{task_id}/assignees", response_model=AssigneeResponse, status_code=status.HTTP_201_CREATED)
async def add_assignee(
    task_id: uuid.UUID,
    assignee: AssigneeAdd,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await assignments.add_assignee(db, subject, task_id, assignee.user_id)

@router.put("/{task_id}/assignees", response_model=List[AssigneeResponse])
async def set_assignees(
    task_id: uuid.UUID,
    assignee_set: AssigneeSet,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await assignments.set_assignees(db, subject, task_id, assignee_set.user_ids)

@router.delete("/{task_id}/assignees/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_assignee(
    task_id: uuid.UUID,
    user_id: uuid.UUID,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    await assignments.remove_assignee(db, subject, task_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
