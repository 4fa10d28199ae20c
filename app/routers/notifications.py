from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.models.notification import Notification
from app.schemas.notification import NotificationRead, UnreadCount

router = APIRouter()


def _mine(db: Session, me: Identity):
    return db.query(Notification).filter(Notification.user_id == me.user_id)


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return _mine(db, me).order_by(Notification.created_at.desc()).all()


@router.get("/unread-count", response_model=UnreadCount)
def unread_count(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return UnreadCount(count=_mine(db, me).filter(Notification.read.is_(False)).count())


@router.patch("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    _mine(db, me).filter(Notification.read.is_(False)).update(
        {Notification.read: True}, synchronize_session=False
    )
    db.commit()
    return {"message": "All notifications marked as read"}


@router.patch("/{notification_id}/read", response_model=NotificationRead)
def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    notification = _mine(db, me).filter(Notification.id == notification_id).first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification
