from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.core import config
from backend.database import get_db
from backend.models.notification import Notification
from backend.models.user import User

router = APIRouter(tags=['notifications'])


class NotificationResponse(BaseModel):
    id: int
    content: str
    user_id: int
    read: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


@router.get('/notifications', response_model=list[NotificationResponse])
def list_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not current_user.provider:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Only providers can load notifications.',
        )

    return (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(config.NOTIFICATIONS_LIMIT)
        .all()
    )


@router.put('/notifications/{notification_id}', response_model=NotificationResponse)
def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Notification not found.')

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification
