from sqlalchemy import Boolean, Column, DateTime, String, Text

from app.core.utils import utcnow
from app.db.base_class import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True)
    user_id = Column(String(100), nullable=False, index=True)

    # feedback | status_change | grade | new_submission | milestone_reminder
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(String(64), nullable=True)
    link = Column(String(255), nullable=True)

    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
