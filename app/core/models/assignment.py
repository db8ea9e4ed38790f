"""Class tasks (assignments), their topics and per-student completion."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Topic(Base):
    __tablename__ = "topics"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("topic_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("assignment_"))
    user_id = Column(String(255), nullable=False)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    data = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    topic = Column(String(64), nullable=True)  # topic id, free association
    working_date = Column(DateTime(timezone=True), nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StudentAssignment(Base):
    """One completion record per (assignment, student). complete may be null in legacy rows."""

    __tablename__ = "student_assignments"
    __table_args__ = (UniqueConstraint("assignment_id", "student_id", name="uq_student_assignment"),)

    id = Column(String(64), primary_key=True, default=lambda: generate_id("sa_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    assignment_id = Column(String(64), ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    complete = Column(Boolean, nullable=True, default=False)
    completed_ts = Column(DateTime(timezone=True), nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
