"""Appointment booking rules.

``AppointmentService`` is bound to one database session and holds no other
state, so routes build a fresh instance per request.
"""

import logging
from datetime import datetime
from typing import Any, Callable

from pydantic import BaseModel, PositiveInt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from backend.core import config
from backend.core.errors import (
    AppointmentNotActiveError,
    CancellationWindowExpiredError,
    ForbiddenError,
    InvalidProviderError,
    InvalidTimeError,
    NotFoundError,
    SlotTakenError,
    ValidationError,
)
from backend.core.timeutils import format_slot, start_of_hour, to_naive_utc, utcnow
from backend.jobs import cancellation_mail
from backend.models.appointment import Appointment
from backend.models.user import User
from backend.services.notifier import Notifier

logger = logging.getLogger(__name__)


class CreateAppointmentRequest(BaseModel):
    provider_id: PositiveInt
    date: datetime


def serialize_for_mail(appointment: Appointment) -> dict:
    return {
        'id': appointment.id,
        'date': appointment.date.isoformat(),
        'canceled_at': appointment.canceled_at.isoformat() if appointment.canceled_at else None,
        'provider': {'name': appointment.provider.name, 'email': appointment.provider.email},
        'user': {'name': appointment.user.name},
    }


class AppointmentService:
    def __init__(
        self,
        db: Session,
        notifier: Notifier | None = None,
        mail_queue=None,
        now: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.notifier = notifier or Notifier(db)
        self.mail_queue = mail_queue
        self.now = now

    def list(self, user_id: int, page: int = 1) -> list[Appointment]:
        page_size = config.APPOINTMENTS_PAGE_SIZE
        page = max(page, 1)

        return (
            self.db.query(Appointment)
            .options(joinedload(Appointment.provider).joinedload(User.avatar))
            .filter(
                Appointment.user_id == user_id,
                Appointment.canceled_at.is_(None),
            )
            .order_by(Appointment.date.asc())
            .limit(page_size)
            .offset((page - 1) * page_size)
            .all()
        )

    def create(self, requesting_user_id: int, provider_id: Any, date: Any) -> Appointment:
        """Book the hour slot containing ``date`` with ``provider_id``.

        The checks run in a fixed order: input shape, provider existence,
        slot in the past, slot already taken, self-booking. Callers rely on
        that order to know which error wins when several apply.
        """
        try:
            data = CreateAppointmentRequest(provider_id=provider_id, date=date)
        except PydanticValidationError as exc:
            raise ValidationError() from exc

        provider = self.db.query(User).filter(
            User.id == data.provider_id,
            User.provider.is_(True),
        ).first()
        if provider is None:
            raise NotFoundError('Provider not found.')

        hour_start = start_of_hour(to_naive_utc(data.date))
        if hour_start < self.now():
            raise InvalidTimeError()

        taken = self.db.query(Appointment).filter(
            Appointment.provider_id == provider.id,
            Appointment.canceled_at.is_(None),
            Appointment.date == hour_start,
        ).first()
        if taken is not None:
            raise SlotTakenError()

        if requesting_user_id == provider.id:
            raise InvalidProviderError()

        user = self.db.get(User, requesting_user_id)
        if user is None:
            raise NotFoundError('User not found.')

        self.notifier.create(
            f'Novo agendamento de {user.name} para {format_slot(hour_start)}',
            provider.id,
        )

        appointment = Appointment(
            user_id=user.id,
            provider_id=provider.id,
            date=hour_start,
        )
        self.db.add(appointment)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise SlotTakenError() from exc

        self.db.refresh(appointment)
        logger.info(
            'Appointment %s booked by user %s with provider %s at %s',
            appointment.id,
            user.id,
            provider.id,
            hour_start.isoformat(),
        )
        return appointment

    def cancel(self, requesting_user_id: int, appointment_id: int) -> Appointment:
        appointment = self.db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError('Appointment not found.')

        if appointment.user_id != requesting_user_id:
            raise ForbiddenError()

        if appointment.canceled_at is not None:
            raise AppointmentNotActiveError()

        now = self.now()
        if not appointment.is_cancelable(now):
            raise CancellationWindowExpiredError()

        appointment.canceled_at = now
        self.db.commit()
        self.db.refresh(appointment)
        logger.info('Appointment %s canceled by user %s', appointment.id, requesting_user_id)

        if self.mail_queue is not None:
            self.mail_queue.enqueue(cancellation_mail.KEY, {'appointment': serialize_for_mail(appointment)})

        return appointment
