"""Uploaded file model definitions."""

from sqlalchemy import Column, DateTime, Integer, String

from backend.core import config
from backend.core.timeutils import utcnow
from backend.database import Base


class File(Base):
    """An uploaded file, currently only used as a user avatar."""
    __tablename__ = "files"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    path = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    @property
    def url(self) -> str:
        return f"{config.APP_URL}/files/{self.path}"
