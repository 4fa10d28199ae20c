from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.current_user import Identity, get_current_user
from app.core.deps import get_db
from app.schemas.discussion import (
    MessageCreate,
    MessagePosted,
    ThreadCreate,
    ThreadRead,
    ThreadWithMessages,
)
from app.services import discussions

router = APIRouter()


@router.get("/{group_id}/threads", response_model=list[ThreadRead])
def list_threads(
    group_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    discussions.ensure_discussion_access(db, group_id, me)
    return discussions.list_threads(db, group_id)


@router.post(
    "/{group_id}/threads",
    response_model=ThreadWithMessages,
    status_code=status.HTTP_201_CREATED,
)
def create_thread(
    group_id: str,
    payload: ThreadCreate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    group = discussions.ensure_discussion_access(db, group_id, me)
    return discussions.create_thread(db, group, me, payload)


@router.get("/{group_id}/threads/{thread_id}", response_model=ThreadWithMessages)
def get_thread(
    group_id: str,
    thread_id: str,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    discussions.ensure_discussion_access(db, group_id, me)
    thread = discussions.get_thread_or_404(db, group_id, thread_id)
    return discussions.get_thread_with_messages(thread)


@router.post(
    "/{group_id}/threads/{thread_id}/messages",
    response_model=MessagePosted,
    status_code=status.HTTP_201_CREATED,
)
def post_message(
    group_id: str,
    thread_id: str,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    me: Identity = Depends(get_current_user),
):
    discussions.ensure_discussion_access(db, group_id, me)
    thread = discussions.get_thread_or_404(db, group_id, thread_id)
    return discussions.post_message(db, thread, me, payload.body)
