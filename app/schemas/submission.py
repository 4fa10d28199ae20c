from typing import Any, Literal, Optional

from app.schemas.base import CamelModel, UtcDatetime

SubmissionType = Literal["pdf", "zip", "link", "report", "other"]


class Milestone(CamelModel):
    label: str
    date: str
    done: bool = False


class FeedbackEntry(CamelModel):
    by: str
    text: str
    date: str


class SubmissionVersion(CamelModel):
    version: int
    content_ref: str
    notes: Optional[str] = None
    created_at: str
    created_by: str
    changes: Optional[str] = None


class SubmissionCreate(CamelModel):
    # required fields are checked by the service so a missing one is a 400
    title: Optional[str] = None
    type: Optional[SubmissionType] = None
    content_ref: Optional[str] = None
    professor_id: Optional[str] = None
    notes: Optional[str] = None
    milestones: Optional[list[Milestone]] = None
    group_id: Optional[str] = None


class SubmissionUpdate(CamelModel):
    """Partial update. Presence matters: use model_fields_set, not None checks."""

    title: Optional[str] = None
    type: Optional[SubmissionType] = None
    content_ref: Optional[str] = None
    notes: Optional[str] = None
    milestones: Optional[list[Milestone]] = None
    professor_id: Optional[str] = None
    changes: Optional[str] = None


class SubmissionComment(CamelModel):
    text: Optional[str] = None


class SubmissionFeedback(CamelModel):
    text: Optional[str] = None
    # anything outside the status enum, or a non-number grade, is ignored
    status: Any = None
    grade: Any = None


class SubmissionRead(CamelModel):
    id: str
    student_id: str
    professor_id: str
    group_id: Optional[str] = None
    title: str
    type: str
    content_ref: str
    notes: Optional[str] = None
    milestones: list[Milestone] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime
    status: str
    grade: Optional[float] = None
    feedback: list[FeedbackEntry] = []
    versions: list[SubmissionVersion] = []
    current_version: int


class VersionHistory(CamelModel):
    versions: list[SubmissionVersion]
    current_version: int
