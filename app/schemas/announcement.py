from typing import Optional

from pydantic import StrictBool

from app.schemas.base import CamelModel, UtcDatetime


class AnnouncementCreate(CamelModel):
    title: Optional[str] = None
    message: Optional[str] = None
    pinned: bool = True


class AnnouncementUpdate(CamelModel):
    title: Optional[str] = None
    message: Optional[str] = None
    pinned: Optional[StrictBool] = None


class AnnouncementRead(CamelModel):
    id: str
    title: str
    message: str
    pinned: bool
    created_by: str
    created_at: UtcDatetime
