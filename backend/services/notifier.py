from sqlalchemy.orm import Session

from backend.models.notification import Notification


class Notifier:
    """Stores notifications in the caller's session; the caller commits."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, content: str, target_user_id: int) -> Notification:
        notification = Notification(content=content, user_id=target_user_id, read=False)
        self.db.add(notification)
        return notification
