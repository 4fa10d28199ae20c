from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.core.permissions import require_student
from app.core.utils import new_id, utcnow
from app.models.group import Group
from app.schemas.group import GroupCreate, GroupMemberAdd, GroupRead, GroupUpdate
from app.services.groups import get_group_or_404, groups_for_member
from app.services.users import get_user

router = APIRouter()


def _ensure_creator(group: Group, me: Identity, action: str) -> None:
    if group.created_by != me.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only the group creator can {action}",
        )


@router.post("", response_model=GroupRead, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    db: Session = Depends(get_db),
    me: Identity = Depends(require_student),
):
    if not payload.name:
        raise HTTPException(status_code=400, detail="Group name is required")

    now = utcnow()
    group = Group(
        id=new_id("group"),
        name=payload.name,
        description=payload.description,
        created_by=me.user_id,
        # creator is automatically a member
        members=[me.user_id],
        created_at=now,
        updated_at=now,
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    return group


@router.get("", response_model=list[GroupRead])
def list_groups(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    if me.is_professor:
        return db.query(Group).order_by(Group.created_at).all()
    return groups_for_member(db, me.user_id)


@router.get("/{group_id}", response_model=GroupRead)
def get_group(
    group_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    if me.is_student and not group.has_member(me.user_id):
        raise HTTPException(status_code=403, detail="You are not a member of this group")
    return group


@router.patch("/{group_id}", response_model=GroupRead)
def update_group(
    group_id: str,
    payload: GroupUpdate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    group = get_group_or_404(db, group_id)
    _ensure_creator(group, me, "update group details")

    if payload.name:
        group.name = payload.name
    if "description" in payload.model_fields_set:
        group.description = payload.description
    group.updated_at = utcnow()

    db.commit()
    db.refresh(group)
    return group


@router.post("/{group_id}/members", response_model=GroupRead)
def add_member(
    group_id: str,
    payload: GroupMemberAdd,
    db: Session = Depends(get_db),
    me: Identity = Depends(require_student),
):
    if not payload.student_id:
        raise HTTPException(status_code=400, detail="Student ID is required")

    group = get_group_or_404(db, group_id)
    _ensure_creator(group, me, "add members")

    student = get_user(db, payload.student_id)
    if not student or student.role != "student" or not student.verified:
        raise HTTPException(status_code=400, detail="Student not found or not verified")
    if group.has_member(payload.student_id):
        raise HTTPException(status_code=400, detail="Student is already a member")

    group.members = [*group.members, payload.student_id]
    group.updated_at = utcnow()
    db.commit()
    db.refresh(group)
    return group


@router.delete("/{group_id}/members/{student_id}", response_model=GroupRead)
def remove_member(
    group_id: str,
    student_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(require_student),
):
    group = get_group_or_404(db, group_id)

    # the creator removes anyone, a member removes only themselves
    if group.created_by != me.user_id and student_id != me.user_id:
        raise HTTPException(
            status_code=403,
            detail="You can only remove yourself or be removed by the creator",
        )
    if student_id == group.created_by:
        raise HTTPException(status_code=400, detail="Cannot remove the group creator")

    group.members = [m for m in group.members if m != student_id]
    group.updated_at = utcnow()
    db.commit()
    db.refresh(group)
    return group
