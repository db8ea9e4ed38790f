"""One row per (class, student, date) absence. No row means present."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, UniqueConstraint

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class AbsentDate(Base):
    __tablename__ = "absent_dates"
    __table_args__ = (UniqueConstraint("class_id", "student_id", "date", name="uq_absent_class_student_date"),)

    id = Column(String(64), primary_key=True, default=lambda: generate_id("absence_"))
    user_id = Column(String(255), nullable=False)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    date = Column(Date, nullable=False)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
