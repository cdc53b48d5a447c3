from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from backend.auth.dependencies import get_current_user
from backend.core.errors import NotFoundError
from backend.core.timeutils import local_day_bounds, local_hour_slots, utcnow
from backend.database import get_db
from backend.models.appointment import Appointment
from backend.models.user import User
from backend.routes.appointment_routes import DATABASE_UNAVAILABLE, ensure_database_ready

router = APIRouter(tags=['availability'])

OPEN_HOUR = 8
LAST_START_HOUR = 19
SCHEDULE_HOURS = range(OPEN_HOUR, LAST_START_HOUR + 1)


class AvailableSlotResponse(BaseModel):
    time: str
    value: datetime
    available: bool


class ScheduleClientResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class ScheduleItemResponse(BaseModel):
    id: int
    date: datetime
    past: bool
    user: ScheduleClientResponse

    class Config:
        from_attributes = True


def get_taken_slot_starts(provider_id: int, day: date, db: Session) -> set[datetime]:
    day_start, day_end = local_day_bounds(day)
    rows = db.query(Appointment.date).filter(
        Appointment.provider_id == provider_id,
        Appointment.canceled_at.is_(None),
        Appointment.date >= day_start,
        Appointment.date < day_end,
    ).all()
    return {taken_date for (taken_date,) in rows}


def list_available_slots(provider_id: int, day: date, now: datetime, db: Session) -> list[AvailableSlotResponse]:
    """Every bookable hour of ``day`` for the provider, flagged by whether it can still be booked."""
    provider = db.query(User).filter(User.id == provider_id, User.provider.is_(True)).first()
    if provider is None:
        raise NotFoundError('Provider not found.')

    taken = get_taken_slot_starts(provider.id, day, db)
    return [
        AvailableSlotResponse(
            time=f'{hour:02d}:00',
            value=slot,
            available=slot >= now and slot not in taken,
        )
        for hour, slot in zip(SCHEDULE_HOURS, local_hour_slots(day, SCHEDULE_HOURS))
    ]


def list_day_schedule(provider_id: int, day: date, db: Session) -> list[Appointment]:
    day_start, day_end = local_day_bounds(day)
    return (
        db.query(Appointment)
        .options(joinedload(Appointment.user))
        .filter(
            Appointment.provider_id == provider_id,
            Appointment.canceled_at.is_(None),
            Appointment.date >= day_start,
            Appointment.date < day_end,
        )
        .order_by(Appointment.date.asc())
        .all()
    )


@router.get(
    '/providers/{provider_id}/available',
    response_model=list[AvailableSlotResponse],
    dependencies=[Depends(get_current_user)],
)
def list_provider_availability(
    provider_id: int,
    day: date = Query(alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return list_available_slots(provider_id, day, utcnow(), db)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


@router.get('/schedules', response_model=list[ScheduleItemResponse])
def list_schedule(
    day: date = Query(alias='date'),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not current_user.provider:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='User is not a provider.',
        )

    ensure_database_ready()

    try:
        return list_day_schedule(current_user.id, day, db)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc
