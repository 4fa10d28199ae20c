from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.core.permissions import require_professor
from app.core.utils import new_id
from app.models.announcement import Announcement
from app.schemas.announcement import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate

router = APIRouter()


def _ensure_announcement_exists(db: Session, announcement_id: str) -> Announcement:
    announcement = db.get(Announcement, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Announcement not found")
    return announcement


@router.get("", response_model=list[AnnouncementRead])
def list_announcements(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    query = db.query(Announcement)
    # students only see pinned announcements
    if not me.is_professor:
        query = query.filter(Announcement.pinned.is_(True))
    return query.order_by(Announcement.created_at.desc()).all()


@router.post("", response_model=AnnouncementRead, status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: AnnouncementCreate,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    title = (payload.title or "").strip()
    message = (payload.message or "").strip()
    if not title or not message:
        raise HTTPException(status_code=400, detail="Title and message are required")

    announcement = Announcement(
        id=new_id("announcement"),
        title=title,
        message=message,
        pinned=payload.pinned,
        created_by=professor.user_id,
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


@router.patch("/{announcement_id}", response_model=AnnouncementRead)
def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdate,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    announcement = _ensure_announcement_exists(db, announcement_id)

    if payload.title is not None:
        announcement.title = payload.title.strip()
    if payload.message is not None:
        announcement.message = payload.message.strip()
    if payload.pinned is not None:
        announcement.pinned = payload.pinned

    db.commit()
    db.refresh(announcement)
    return announcement


@router.delete("/{announcement_id}")
def delete_announcement(
    announcement_id: str,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    announcement = _ensure_announcement_exists(db, announcement_id)
    db.delete(announcement)
    db.commit()
    return {"success": True}
