"""Class rubric items and the per-student value recorded against each."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Expectation(Base):
    __tablename__ = "expectations"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("expectation_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StudentExpectation(Base):
    """value is free text, number is numeric; either may be set."""

    __tablename__ = "student_expectations"
    __table_args__ = (UniqueConstraint("expectation_id", "student_id", name="uq_student_expectation"),)

    id = Column(String(64), primary_key=True, default=lambda: generate_id("se_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    expectation_id = Column(String(64), ForeignKey("expectations.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(255), nullable=False)
    value = Column(Text, nullable=True)
    number = Column(Integer, nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
