from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import STUDENT_YEARS
from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.core.permissions import require_professor
from app.models.user import User
from app.schemas.user import ProfessorOption, ProfileUpdate, UserRead, UserSummary
from app.services.users import get_user, list_verified

router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/user/all-students", response_model=list[UserSummary])
def all_students(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return list_verified(db, "student")


@router.get("/user/profile", response_model=UserRead)
def my_profile(
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return _get_user_or_404(db, me.user_id)


@router.patch("/user/profile", response_model=UserRead)
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    user = _get_user_or_404(db, me.user_id)
    provided = payload.model_fields_set

    if "name" in provided:
        user.name = payload.name
    if "profile_picture" in provided:
        user.profile_picture = payload.profile_picture
    if me.is_student:
        if "branch" in provided:
            user.branch = payload.branch
        # an unknown year is ignored, not rejected
        if payload.year in STUDENT_YEARS:
            user.year = payload.year

    db.commit()
    db.refresh(user)
    return user


@router.get("/user/{user_id}", response_model=UserRead)
def user_profile(
    user_id: str,
    db: Session = Depends(get_db),
    professor: Identity = Depends(require_professor),
):
    return _get_user_or_404(db, user_id)


@router.get("/professors", response_model=list[ProfessorOption])
def professors(db: Session = Depends(get_db)):
    return [
        ProfessorOption(id=p.user_id, user_id=p.user_id, name=p.name or p.user_id, email=p.email)
        for p in list_verified(db, "professor")
    ]
