import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from taskboard.core.database import Base, utcnow

class TaskAttachment(Base):
    __tablename__ = "task_attachments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    task_id = Column(Uuid, ForeignKey("tasks.id", ondelete="CASCADE"), index=True, nullable=False)
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    uploaded_by = Column(Uuid, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
