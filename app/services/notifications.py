from sqlalchemy.orm import Session

from app.core.utils import new_id
from app.models.notification import Notification


def notify(
    db: Session,
    user_id: str,
    type_: str,
    title: str,
    message: str,
    related_id: str | None = None,
    link: str | None = None,
) -> Notification:
    """Queue a notification in the current session; the caller commits."""
    notification = Notification(
        id=new_id("notif"),
        user_id=user_id,
        type=type_,
        title=title,
        message=message,
        related_id=related_id,
        link=link,
        read=False,
    )
    db.add(notification)
    return notification
