from typing import Optional

from app.schemas.base import CamelModel, UtcDatetime


class GroupCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupMemberAdd(CamelModel):
    student_id: Optional[str] = None


class GroupRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    created_by: str
    members: list[str]
    created_at: UtcDatetime
    updated_at: UtcDatetime
