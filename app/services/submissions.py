"""Submission lifecycle: creation, versioning, review and professor reconciliation.

Every function takes the caller's ``Identity`` explicitly, validates before it
touches any row, and commits once at the end.
"""
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import SUBMISSION_STATUSES
from app.core.current_user import Identity
from app.core.deps import commit_or_rollback
from app.core.utils import new_id, to_iso, utcnow, utcnow_iso
from app.models.submission import Submission
from app.schemas.submission import (
    SubmissionCreate,
    SubmissionFeedback,
    SubmissionUpdate,
    VersionHistory,
)
from app.services import groups as group_service
from app.services import users as user_service
from app.services.notifications import notify

logger = logging.getLogger(__name__)

INITIAL_VERSION_CHANGES = "Initial submission"
CONTENT_UPDATED_CHANGES = "Content updated"
NOTES_UPDATED_CHANGES = "Notes updated"

STATUS_MESSAGES = {
    "approved": "Your submission has been approved!",
    "resubmit": "Your submission needs to be resubmitted",
    "submitted": "Your submission status has been updated",
}


def _forbidden(detail: str = "Forbidden") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def get_submission_or_404(db: Session, submission_id: str) -> Submission:
    sub = db.get(Submission, submission_id)
    if not sub:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return sub


def list_all_submissions(db: Session) -> list[Submission]:
    return db.query(Submission).order_by(Submission.created_at).all()


# --- professor reconciliation -------------------------------------------------


def professor_matches(stored: str | None, professor_id: str) -> bool:
    """
    Does a stored professorId refer to ``professor_id``?

    Rules, first match wins:
    - exact equality
    - case-insensitive equality
    - case-insensitive containment in either direction
    """
    if not stored:
        return False
    if stored == professor_id:
        return True

    stored_lower = stored.lower()
    target_lower = professor_id.lower()
    if stored_lower == target_lower:
        return True
    return target_lower in stored_lower or stored_lower in target_lower


def _canonicalize_professor(sub: Submission, professor_id: str) -> bool:
    if sub.professor_id == professor_id:
        return False
    logger.info(
        "Reconciled professorId on %s: %r -> %r", sub.id, sub.professor_id, professor_id
    )
    sub.professor_id = professor_id
    return True


def reconcile_professor(
    db: Session,
    submissions: list[Submission],
    professor_id: str,
    persist: bool = False,
) -> list[Submission]:
    """
    Submissions that belong to ``professor_id`` under the matching rules.

    With ``persist`` every fuzzy match has its professorId rewritten to
    ``professor_id`` and saved, so drifted ids converge over time.
    """
    matches: list[Submission] = []
    rewritten = False
    for sub in submissions:
        if not professor_matches(sub.professor_id, professor_id):
            continue
        if persist:
            rewritten = _canonicalize_professor(sub, professor_id) or rewritten
        matches.append(sub)

    if rewritten:
        commit_or_rollback(db)
    return matches


# --- access checks ------------------------------------------------------------


def _ensure_student_access(db: Session, sub: Submission, identity: Identity) -> None:
    if sub.student_id == identity.user_id:
        return
    if sub.group_id and group_service.is_member(db, sub.group_id, identity.user_id):
        return
    raise _forbidden()


def _ensure_assigned_professor(sub: Submission, identity: Identity, detail: str = "Forbidden") -> None:
    # exact match only, writes never reconcile
    if sub.professor_id != identity.user_id:
        raise _forbidden(detail)


def _ensure_professor_access(db: Session, sub: Submission, identity: Identity) -> bool:
    """Returns True when the stored professorId was rewritten (caller commits)."""
    if not professor_matches(sub.professor_id, identity.user_id):
        raise _forbidden()
    return _canonicalize_professor(sub, identity.user_id)


def _ensure_access(db: Session, sub: Submission, identity: Identity) -> bool:
    if identity.is_professor:
        return _ensure_professor_access(db, sub, identity)
    _ensure_student_access(db, sub, identity)
    return False


# --- operations ---------------------------------------------------------------


def create_submission(db: Session, identity: Identity, payload: SubmissionCreate) -> Submission:
    if not identity.is_student:
        raise _forbidden("Only students can submit")

    if not (payload.title and payload.type and payload.content_ref and payload.professor_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields: title, type, contentRef, and professorId are required",
        )

    user_service.ensure_verified_professor(db, payload.professor_id)

    if payload.group_id:
        group = group_service.get_group(db, payload.group_id)
        if not group:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Group not found")
        if not group.has_member(identity.user_id):
            raise _forbidden("You are not a member of this group")

    now = utcnow()
    sub = Submission(
        id=new_id("sub"),
        student_id=identity.user_id,
        professor_id=payload.professor_id,
        group_id=payload.group_id,
        title=payload.title,
        type=payload.type,
        content_ref=payload.content_ref,
        notes=payload.notes,
        milestones=[m.model_dump() for m in payload.milestones or []],
        created_at=now,
        updated_at=now,
        status="submitted",
        current_version=1,
        versions=[
            {
                "version": 1,
                "contentRef": payload.content_ref,
                "notes": payload.notes,
                "createdAt": to_iso(now),
                "createdBy": identity.user_id,
                "changes": INITIAL_VERSION_CHANGES,
            }
        ],
        feedback=[],
    )
    db.add(sub)

    submitter = "Group submission" if payload.group_id else identity.user_id
    notify(
        db,
        payload.professor_id,
        "new_submission",
        "New Submission Received",
        f'{submitter} submitted "{payload.title}"',
        related_id=sub.id,
        link="/professor",
    )

    commit_or_rollback(db)
    db.refresh(sub)
    logger.info("Submission %s created by %s for %s", sub.id, sub.student_id, sub.professor_id)
    return sub


def _apply_student_update(sub: Submission, identity: Identity, payload: SubmissionUpdate) -> None:
    provided = payload.model_fields_set

    content_changed = bool(payload.content_ref) and payload.content_ref != sub.content_ref
    # an explicit "" or null still counts as a notes edit
    notes_changed = "notes" in provided and payload.notes != sub.notes

    if content_changed or notes_changed:
        next_version = (sub.current_version or 1) + 1
        new_notes = payload.notes if "notes" in provided else sub.notes
        entry = {
            "version": next_version,
            "contentRef": payload.content_ref or sub.content_ref,
            "notes": new_notes,
            "createdAt": utcnow_iso(),
            "createdBy": identity.user_id,
            "changes": payload.changes
            or (CONTENT_UPDATED_CHANGES if content_changed else NOTES_UPDATED_CHANGES),
        }
        sub.versions = [*(sub.versions or []), entry]
        sub.current_version = next_version
        sub.content_ref = entry["contentRef"]
        sub.notes = new_notes
        logger.info("Submission %s now at version %d", sub.id, next_version)

    if payload.title is not None:
        sub.title = payload.title
    if payload.type is not None:
        sub.type = payload.type
    if payload.milestones is not None:
        sub.milestones = [m.model_dump() for m in payload.milestones]
    if payload.professor_id is not None:
        sub.professor_id = payload.professor_id


def _apply_professor_update(sub: Submission, payload: SubmissionUpdate) -> None:
    # professor edits never create a version
    if "notes" in payload.model_fields_set:
        sub.notes = payload.notes
    if payload.milestones is not None:
        sub.milestones = [m.model_dump() for m in payload.milestones]


def update_submission(
    db: Session,
    identity: Identity,
    submission_id: str,
    payload: SubmissionUpdate,
) -> Submission:
    sub = get_submission_or_404(db, submission_id)

    if identity.is_student:
        _ensure_student_access(db, sub, identity)
        if payload.professor_id is not None:
            user_service.ensure_verified_professor(db, payload.professor_id)
        _apply_student_update(sub, identity, payload)
    else:
        _ensure_assigned_professor(sub, identity)
        _apply_professor_update(sub, payload)

    sub.updated_at = utcnow()
    commit_or_rollback(db)
    db.refresh(sub)
    return sub


def add_student_comment(
    db: Session,
    identity: Identity,
    submission_id: str,
    text: str | None,
) -> Submission:
    if not identity.is_student:
        raise _forbidden("Only students can add comments")
    if not text or not text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Comment text is required",
        )

    sub = get_submission_or_404(db, submission_id)
    # exact ownership: group members cannot comment
    if sub.student_id != identity.user_id:
        raise _forbidden("You can only comment on your own submissions")

    sub.feedback = [
        *(sub.feedback or []),
        {"by": identity.user_id, "text": text.strip(), "date": utcnow_iso()},
    ]
    sub.updated_at = utcnow()
    commit_or_rollback(db)
    db.refresh(sub)
    return sub


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_grade(value) -> str:
    # whole numbers print without a trailing ".0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def apply_professor_feedback(
    db: Session,
    identity: Identity,
    submission_id: str,
    payload: SubmissionFeedback,
) -> Submission:
    if not identity.is_professor:
        raise _forbidden("Only professors can comment")

    sub = get_submission_or_404(db, submission_id)
    _ensure_assigned_professor(sub, identity, "You are not assigned to this submission")

    old_status = sub.status
    old_grade = sub.grade

    status_applied = isinstance(payload.status, str) and payload.status in SUBMISSION_STATUSES
    grade_applied = _is_number(payload.grade)

    if payload.text:
        sub.feedback = [
            *(sub.feedback or []),
            {"by": identity.user_id, "text": payload.text, "date": utcnow_iso()},
        ]
    if status_applied:
        sub.status = payload.status
    if grade_applied:
        sub.grade = payload.grade
    sub.updated_at = utcnow()

    if payload.text:
        notify(
            db,
            sub.student_id,
            "feedback",
            "New Feedback Received",
            f'{identity.user_id} commented on "{sub.title}"',
            related_id=sub.id,
            link="/student",
        )
    if status_applied and payload.status != old_status:
        notify(
            db,
            sub.student_id,
            "status_change",
            "Submission Status Updated",
            STATUS_MESSAGES[payload.status],
            related_id=sub.id,
            link="/student",
        )
    if grade_applied and payload.grade != old_grade:
        notify(
            db,
            sub.student_id,
            "grade",
            "Grade Assigned",
            f'You received a grade of {_format_grade(payload.grade)}/100 for "{sub.title}"',
            related_id=sub.id,
            link="/student",
        )

    commit_or_rollback(db)
    db.refresh(sub)
    return sub


def list_submissions(
    db: Session,
    identity: Identity,
    student_id: str | None = None,
    group_id: str | None = None,
) -> list[Submission]:
    submissions = list_all_submissions(db)

    if identity.is_student:
        my_groups = {g.id for g in group_service.groups_for_member(db, identity.user_id)}
        items = [
            s
            for s in submissions
            if s.student_id == identity.user_id or (s.group_id and s.group_id in my_groups)
        ]
    else:
        items = reconcile_professor(db, submissions, identity.user_id, persist=True)

    if student_id:
        items = [s for s in items if s.student_id == student_id]
    if group_id:
        items = [s for s in items if s.group_id == group_id]
    return items


def get_versions(
    db: Session,
    identity: Identity,
    submission_id: str,
) -> VersionHistory:
    sub = _load_for_version_read(db, identity, submission_id)
    return VersionHistory(versions=sub.versions or [], current_version=sub.current_version or 1)


def get_version(
    db: Session,
    identity: Identity,
    submission_id: str,
    version: int,
) -> dict:
    sub = _load_for_version_read(db, identity, submission_id)
    for entry in sub.versions or []:
        if entry.get("version") == version:
            return entry
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Version not found")


def _load_for_version_read(db: Session, identity: Identity, submission_id: str) -> Submission:
    sub = get_submission_or_404(db, submission_id)
    if _ensure_access(db, sub, identity):
        commit_or_rollback(db)
    return sub
