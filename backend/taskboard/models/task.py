import uuid

from sqlalchemy import (
    Column, String, Text, Date, DateTime, Boolean, JSON, ForeignKey,
    CheckConstraint, UniqueConstraint, Index, Uuid,
)
from taskboard.core.database import Base, utcnow

class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("status IN ('to_do', 'in_progress', 'done')", name="ck_tasks_status"),
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_tasks_priority"),
        CheckConstraint("category IN ('work', 'personal')", name="ck_tasks_category"),
        Index("idx_tasks_created_by", "created_by"),
        Index("idx_tasks_status", "status"),
        Index("idx_tasks_is_deleted", "is_deleted"),
        Index("idx_tasks_due_date", "due_date"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    status = Column(String, nullable=False, default="to_do")
    priority = Column(String, nullable=False, default="medium")
    due_date = Column(Date, nullable=True)
    category = Column(String, nullable=False, default="work")
    tags = Column(JSON, nullable=False, default=list)
    created_by = Column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class TaskAssignee(Base):
    __tablename__ = "task_assignees"
    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="uq_task_assignees_task_user"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    assigned_at = Column(DateTime(timezone=True), default=utcnow)
