from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text

from app.core.utils import utcnow
from app.db.base_class import Base


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(64), primary_key=True)

    # plain user ids, no FK: professor_id can be rewritten by reconciliation
    student_id = Column(String(100), nullable=False, index=True)
    professor_id = Column(String(100), nullable=False, index=True)
    group_id = Column(String(64), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    content_ref = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)

    # JSON lists are always reassigned, never mutated in place
    milestones = Column(JSON, nullable=False, default=list)
    feedback = Column(JSON, nullable=False, default=list)
    versions = Column(JSON, nullable=False, default=list)
    current_version = Column(Integer, nullable=False, default=1)

    status = Column(String(20), nullable=False, default="submitted")
    grade = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
