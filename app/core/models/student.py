"""Students are global; class membership lives in student_classes (enrollments)."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Student(Base):
    __tablename__ = "students"

    student_id = Column(String(64), primary_key=True, default=lambda: generate_id("student_"))
    student_name_en = Column(String(255), nullable=False, default="")
    student_name_first_en = Column(String(255), nullable=False)
    student_name_last_en = Column(String(255), nullable=False, default="")
    student_name_alt = Column(String(255), nullable=True)
    student_reading_level = Column(String(32), nullable=True)
    student_grade = Column(String(16), nullable=True)
    student_sex = Column(String(8), nullable=True)  # male | female | null
    student_number = Column(Integer, nullable=True)
    student_email = Column(String(255), nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StudentClass(Base):
    """Enrollment of a student in a class."""

    __tablename__ = "student_classes"
    __table_args__ = (UniqueConstraint("class_id", "student_id", name="uq_student_class"),)

    enrollment_id = Column(String(64), primary_key=True, default=lambda: generate_id("enrollment_"))
    student_id = Column(String(64), ForeignKey("students.student_id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    enrollment_date = Column(DateTime(timezone=True), default=utcnow, nullable=True)
