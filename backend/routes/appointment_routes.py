import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.database import ensure_appointment_schema, get_db
from backend.jobs.queue import get_mail_queue
from backend.models.user import User
from backend.services.appointment_service import AppointmentService

router = APIRouter(tags=['appointments'])

logger = logging.getLogger(__name__)

DATABASE_UNAVAILABLE = 'Database unavailable. Verify DATABASE_URL and database credentials.'


class AvatarResponse(BaseModel):
    id: int
    path: str
    url: str

    class Config:
        from_attributes = True


class ProviderResponse(BaseModel):
    id: int
    name: str
    avatar: AvatarResponse | None = None

    class Config:
        from_attributes = True


class AppointmentListItemResponse(BaseModel):
    id: int
    date: datetime
    past: bool
    cancelable: bool
    provider: ProviderResponse

    class Config:
        from_attributes = True


class AppointmentResponse(BaseModel):
    id: int
    date: datetime
    user_id: int
    provider_id: int
    canceled_at: datetime | None = None
    past: bool
    cancelable: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


def ensure_database_ready() -> None:
    try:
        ensure_appointment_schema()
    except SQLAlchemyError as exc:
        logger.exception('Appointment schema check failed.')
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db, mail_queue=get_mail_queue())


@router.get('/appointments', response_model=list[AppointmentListItemResponse])
def list_appointments(
    page: int = Query(default=1, ge=1),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    ensure_database_ready()

    try:
        return service.list(current_user.id, page)
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


@router.post('/appointments', response_model=AppointmentResponse)
def create_appointment(
    data: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    ensure_database_ready()

    try:
        return service.create(current_user.id, data.get('provider_id'), data.get('date'))
    except SQLAlchemyError as exc:
        service.db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc


@router.delete('/appointments/{appointment_id}', response_model=AppointmentResponse)
def cancel_appointment(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    ensure_database_ready()

    try:
        return service.cancel(current_user.id, appointment_id)
    except SQLAlchemyError as exc:
        service.db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=DATABASE_UNAVAILABLE,
        ) from exc
