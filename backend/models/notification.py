"""Notification model definitions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from backend.core.timeutils import utcnow
from backend.database import Base


class Notification(Base):
    """A message shown to a user, e.g. a provider learning about a new booking."""
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    content = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
