from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.schemas.submission import (
    SubmissionComment,
    SubmissionCreate,
    SubmissionFeedback,
    SubmissionRead,
    SubmissionUpdate,
    SubmissionVersion,
    VersionHistory,
)
from app.services import submissions as lifecycle

router = APIRouter()


@router.post(
    "",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing fields, invalid professor or unknown group"},
        403: {"description": "Not a student, or not a member of the group"},
    },
)
def create_submission(
    payload: SubmissionCreate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.create_submission(db, me, payload)


@router.get("", response_model=list[SubmissionRead])
def list_submissions(
    studentId: Optional[str] = None,
    groupId: Optional[str] = None,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.list_submissions(db, me, student_id=studentId, group_id=groupId)


@router.patch("/{submission_id}", response_model=SubmissionRead)
def update_submission(
    submission_id: str,
    payload: SubmissionUpdate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.update_submission(db, me, submission_id, payload)


@router.post("/{submission_id}/comment", response_model=SubmissionRead)
def add_comment(
    submission_id: str,
    payload: SubmissionComment,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.add_student_comment(db, me, submission_id, payload.text)


@router.post("/{submission_id}/feedback", response_model=SubmissionRead)
def give_feedback(
    submission_id: str,
    payload: SubmissionFeedback,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.apply_professor_feedback(db, me, submission_id, payload)


@router.get("/{submission_id}/versions", response_model=VersionHistory)
def list_versions(
    submission_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.get_versions(db, me, submission_id)


@router.get("/{submission_id}/versions/{version}", response_model=SubmissionVersion)
def get_version(
    submission_id: str,
    version: int,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    return lifecycle.get_version(db, me, submission_id, version)
