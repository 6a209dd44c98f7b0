# dooriq/models/session.py
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    JSON,
    Uuid,
)

from dooriq.database import Base
from dooriq.schema.grading import GradeSource


class SessionGrade(Base):
    """
    Grade of a single rehearsal session.

    The raw AI payload is kept alongside the computed breakdown so the
    session can be regraded when the rubric changes.
    """

    __tablename__ = "session_grades"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(String, unique=True, index=True, nullable=False)
    source = Column(String, nullable=False, default=GradeSource.PAYLOAD.value)
    total = Column(Integer, nullable=False)
    letter = Column(String, nullable=False)
    passed = Column(Boolean, nullable=False)
    categories = Column(JSON, nullable=False)
    deductions = Column(JSON, nullable=False, default=lambda: [])
    ai_payload = Column(JSON, nullable=True)
    analytics = Column(JSON, nullable=True)
    created_on = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_on = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
