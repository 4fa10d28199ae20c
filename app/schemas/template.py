from typing import Optional

from app.schemas.base import CamelModel, UtcDatetime
from app.schemas.submission import SubmissionType


class TemplateCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[SubmissionType] = None
    instructions: Optional[str] = None
    requirements: Optional[list[str]] = None
    due_date: Optional[str] = None


class TemplateUpdate(TemplateCreate):
    pass


class TemplateRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    type: str
    instructions: Optional[str] = None
    requirements: list[str] = []
    due_date: Optional[str] = None
    created_by: str
    created_at: UtcDatetime
    updated_at: UtcDatetime
