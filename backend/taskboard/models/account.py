import uuid

from sqlalchemy import Column, String, DateTime, Uuid
from taskboard.core.database import Base, utcnow

class Account(Base):
    """Login identity. Its profile row is provisioned alongside it."""

    __tablename__ = "accounts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
