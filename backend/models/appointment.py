"""Appointment model definitions."""

from datetime import timedelta

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, text
from sqlalchemy.orm import relationship

from backend.core import config
from backend.core.timeutils import utcnow
from backend.database import Base
from backend.models.user import User  # noqa: F401


class Appointment(Base):
    """A one-hour slot booked by a client with a provider.

    Appointments are never deleted; cancellation sets ``canceled_at``.
    """
    __tablename__ = "appointments"
    __table_args__ = (
        Index(
            "uq_appointments_active_slot",
            "provider_id",
            "date",
            unique=True,
            sqlite_where=text("canceled_at IS NULL"),
            postgresql_where=text("canceled_at IS NULL"),
        ),
        Index("idx_appointments_user_date", "user_id", "date"),
    )

    id = Column(Integer, primary_key=True)
    date = Column(DateTime, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    canceled_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    user = relationship("User", foreign_keys=[user_id])
    provider = relationship("User", foreign_keys=[provider_id])

    def is_past(self, now=None) -> bool:
        return self.date < (now or utcnow())

    def is_cancelable(self, now=None) -> bool:
        """True up to and including the moment the cancellation window opens."""
        now = now or utcnow()
        return now <= self.date - timedelta(hours=config.CANCELLATION_WINDOW_HOURS)

    @property
    def past(self) -> bool:
        return self.is_past()

    @property
    def cancelable(self) -> bool:
        return self.is_cancelable()
