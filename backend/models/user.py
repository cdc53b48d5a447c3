"""User model definitions."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.core.timeutils import utcnow
from backend.database import Base
from backend.models.file import File  # noqa: F401


class User(Base):
    """Represents a client or, when ``provider`` is set, a service provider."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    provider = Column(Boolean, default=False, nullable=False)
    avatar_id = Column(Integer, ForeignKey("files.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    avatar = relationship("File", lazy="joined")
