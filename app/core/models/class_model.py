"""Classes and the teacher links that scope every read and write. Model named SchoolClass to avoid Python 'class' keyword."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class SchoolClass(Base):
    """A teacher's class. Join code is unique across all classes."""

    __tablename__ = "classes"

    class_id = Column(String(64), primary_key=True, default=lambda: generate_id("class_"))
    class_name = Column(String(255), nullable=False)
    class_language = Column(String(16), nullable=False, default="en-US")
    class_grade = Column(String(16), nullable=True)
    class_year = Column(String(16), nullable=True)
    class_code = Column(String(16), nullable=False, unique=True, index=True)
    # Semester completion flags (exposed as complete.s1 / complete.s2)
    complete_s1 = Column(Boolean, nullable=False, default=False)
    complete_s2 = Column(Boolean, nullable=False, default=False)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    teachers = relationship("TeacherClass", back_populates="school_class")


class TeacherClass(Base):
    """Links a teacher identity to a class. role: primary | assistant."""

    __tablename__ = "teacher_classes"
    __table_args__ = (UniqueConstraint("user_id", "class_id", name="uq_teacher_class_user_class"),)

    assignment_id = Column(String(64), primary_key=True, default=lambda: generate_id("teacher_class_"))
    user_id = Column(String(255), nullable=False, index=True)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(16), nullable=False, default="primary")
    assigned_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    school_class = relationship("SchoolClass", back_populates="teachers")
