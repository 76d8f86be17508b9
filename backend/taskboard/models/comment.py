import uuid

from sqlalchemy import Column, Text, DateTime, ForeignKey, Uuid
from taskboard.core.database import Base, utcnow

class TaskComment(Base):
    __tablename__ = "task_comments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(Uuid, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
