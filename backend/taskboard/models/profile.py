from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, Uuid
from taskboard.core.database import Base, utcnow

class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')", name="ck_profiles_role"),
        CheckConstraint("status IN ('active', 'disabled')", name="ck_profiles_status"),
    )

    id = Column(Uuid, ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    username = Column(String, unique=True, nullable=False)
    role = Column(String, nullable=False, default="employee")
    status = Column(String, nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
