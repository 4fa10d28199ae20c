from typing import Optional

from app.schemas.base import CamelModel, UtcDatetime


class NotificationRead(CamelModel):
    id: str
    user_id: str
    type: str
    title: str
    message: str
    related_id: Optional[str] = None
    read: bool
    created_at: UtcDatetime
    link: Optional[str] = None


class UnreadCount(CamelModel):
    count: int
