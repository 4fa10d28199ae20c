from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.group import Group


def get_group(db: Session, group_id: str) -> Group | None:
    return db.get(Group, group_id)


def get_group_or_404(db: Session, group_id: str) -> Group:
    group = get_group(db, group_id)
    if not group:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return group


def groups_for_member(db: Session, user_id: str) -> list[Group]:
    # members is a JSON list, so membership is checked in Python
    return [g for g in db.query(Group).order_by(Group.created_at).all() if g.has_member(user_id)]


def is_member(db: Session, group_id: str, user_id: str) -> bool:
    group = get_group(db, group_id)
    return group is not None and group.has_member(user_id)
