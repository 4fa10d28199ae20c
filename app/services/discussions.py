from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity
from app.core.deps import commit_or_rollback
from app.core.utils import as_utc, new_id, utcnow
from app.models.discussion import DiscussionMessage, DiscussionThread
from app.models.group import Group
from app.models.submission import Submission
from app.schemas.discussion import (
    MessagePosted,
    MessageRead,
    ThreadCreate,
    ThreadRead,
    ThreadWithMessages,
)
from app.services.groups import get_group_or_404


def ensure_discussion_access(db: Session, group_id: str, identity: Identity) -> Group:
    # professors may follow every group's discussions
    group = get_group_or_404(db, group_id)
    if identity.is_student and not group.has_member(identity.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not a member of this group",
        )
    return group


def _thread_read(thread: DiscussionThread) -> ThreadRead:
    messages = thread.messages
    last = messages[-1] if messages else None
    return ThreadRead(
        id=thread.id,
        group_id=thread.group_id,
        title=thread.title,
        created_by=thread.created_by,
        related_submission_id=thread.related_submission_id,
        created_at=thread.created_at,
        updated_at=thread.updated_at,
        message_count=len(messages),
        last_message_at=last.created_at if last else None,
        last_message=MessageRead.model_validate(last) if last else None,
    )


def _activity(thread: ThreadRead):
    return as_utc(thread.last_message_at or thread.updated_at)


def get_thread_or_404(db: Session, group_id: str, thread_id: str) -> DiscussionThread:
    thread = db.get(DiscussionThread, thread_id)
    if not thread or thread.group_id != group_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Thread not found")
    return thread


def list_threads(db: Session, group_id: str) -> list[ThreadRead]:
    threads = db.query(DiscussionThread).filter(DiscussionThread.group_id == group_id).all()
    return sorted((_thread_read(t) for t in threads), key=_activity, reverse=True)


def _new_message(thread: DiscussionThread, author_id: str, body: str) -> DiscussionMessage:
    return DiscussionMessage(
        id=new_id("msg"),
        thread_id=thread.id,
        group_id=thread.group_id,
        author_id=author_id,
        body=body,
        created_at=utcnow(),
    )


def create_thread(
    db: Session,
    group: Group,
    identity: Identity,
    payload: ThreadCreate,
) -> ThreadWithMessages:
    title = (payload.title or "").strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Thread title is required")

    if payload.related_submission_id:
        sub = db.get(Submission, payload.related_submission_id)
        if not sub or sub.group_id != group.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Related submission must belong to this group",
            )

    now = utcnow()
    thread = DiscussionThread(
        id=new_id("thread"),
        group_id=group.id,
        title=title,
        created_by=identity.user_id,
        related_submission_id=payload.related_submission_id or None,
        created_at=now,
        updated_at=now,
    )
    db.add(thread)

    initial = (payload.initial_message or "").strip()
    if initial:
        thread.messages.append(_new_message(thread, identity.user_id, initial))

    commit_or_rollback(db)
    db.refresh(thread)
    return get_thread_with_messages(thread)


def get_thread_with_messages(thread: DiscussionThread) -> ThreadWithMessages:
    return ThreadWithMessages(
        thread=_thread_read(thread),
        messages=[MessageRead.model_validate(m) for m in thread.messages],
    )


def post_message(
    db: Session,
    thread: DiscussionThread,
    identity: Identity,
    body: str | None,
) -> MessagePosted:
    text = (body or "").strip()
    if not text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty")

    message = _new_message(thread, identity.user_id, text)
    thread.messages.append(message)
    thread.updated_at = message.created_at

    commit_or_rollback(db)
    db.refresh(thread)
    db.refresh(message)
    return MessagePosted(message=MessageRead.model_validate(message), thread=_thread_read(thread))
