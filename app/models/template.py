from sqlalchemy import JSON, Column, DateTime, String, Text

from app.core.utils import utcnow
from app.db.base_class import Base


class AssignmentTemplate(Base):
    __tablename__ = "templates"

    id = Column(String(64), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String(20), nullable=False)
    instructions = Column(Text, nullable=True)
    requirements = Column(JSON, nullable=False, default=list)
    # free-form date string chosen by the professor
    due_date = Column(String(64), nullable=True)

    created_by = Column(String(100), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
