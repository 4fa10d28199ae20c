from typing import Optional

from app.schemas.base import CamelModel, UtcDatetime


class ThreadCreate(CamelModel):
    title: Optional[str] = None
    related_submission_id: Optional[str] = None
    initial_message: Optional[str] = None


class MessageCreate(CamelModel):
    body: Optional[str] = None


class MessageRead(CamelModel):
    id: str
    thread_id: str
    group_id: str
    author_id: str
    body: str
    created_at: UtcDatetime


class ThreadRead(CamelModel):
    id: str
    group_id: str
    title: str
    created_by: str
    related_submission_id: Optional[str] = None
    created_at: UtcDatetime
    updated_at: UtcDatetime

    # derived from the thread's messages
    message_count: int = 0
    last_message_at: Optional[UtcDatetime] = None
    last_message: Optional[MessageRead] = None


class ThreadWithMessages(CamelModel):
    thread: ThreadRead
    messages: list[MessageRead]


class MessagePosted(CamelModel):
    message: MessageRead
    thread: ThreadRead
