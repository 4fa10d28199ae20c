from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.core.utils import utcnow
from app.db.base_class import Base


class DiscussionThread(Base):
    __tablename__ = "discussion_threads"

    id = Column(String(64), primary_key=True)
    group_id = Column(
        String(64), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    created_by = Column(String(100), nullable=False)
    related_submission_id = Column(String(64), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    messages = relationship(
        "DiscussionMessage",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="DiscussionMessage.created_at",
    )


class DiscussionMessage(Base):
    __tablename__ = "discussion_messages"

    id = Column(String(64), primary_key=True)
    thread_id = Column(
        String(64),
        ForeignKey("discussion_threads.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group_id = Column(String(64), nullable=False, index=True)
    author_id = Column(String(100), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    thread = relationship("DiscussionThread", back_populates="messages")
