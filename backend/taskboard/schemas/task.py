from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from enum import Enum
import uuid

class TaskStatus(str, Enum):
    to_do = "to_do"
    in_progress = "in_progress"
    done = "done"

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"

class TaskCategory(str, Enum):
    work = "work"
    personal = "personal"

class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    status: TaskStatus = TaskStatus.to_do
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[date] = None
    category: TaskCategory = TaskCategory.work
    tags: List[str] = Field(default_factory=list)
    assignees: List[uuid.UUID] = Field(default_factory=list)

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[date] = None
    category: Optional[TaskCategory] = None
    tags: Optional[List[str]] = None

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class AssigneeAdd(BaseModel):
    user_id: uuid.UUID

class AssigneeSet(BaseModel):
    user_ids: List[uuid.UUID]

class AssigneeResponse(BaseModel):
    id: uuid.UUID
    task_id: uuid.UUID
    user_id: uuid.UUID
    assigned_at: datetime

    class Config:
        from_attributes = True

class TaskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: Optional[date]
    category: TaskCategory
    tags: List[str]
    created_by: Optional[uuid.UUID]
    is_deleted: bool
    deleted_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    # Related data
    assignee_ids: List[uuid.UUID] = Field(default_factory=list)

    class Config:
        from_attributes = True

class UpcomingTask(BaseModel):
    id: uuid.UUID
    title: str
    status: TaskStatus
    priority: TaskPriority
    due_date: date
    assignees: List[str] = Field(default_factory=list)

class PriorityBreakdown(BaseModel):
    low: int = 0
    medium: int = 0
    high: int = 0

class TaskStats(BaseModel):
    total_tasks: int
    overdue_tasks: int
    due_today_tasks: int
    completed_tasks: int
    open_by_priority: PriorityBreakdown
