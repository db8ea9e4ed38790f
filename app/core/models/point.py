"""Append-only point ledger. A balance is always the sum of number_of_points, never stored."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Point(Base):
    __tablename__ = "points"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("point_"))
    user_id = Column(String(255), nullable=False)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    behavior_id = Column(String(64), nullable=True)
    reward_item_id = Column(String(64), nullable=True)
    type = Column(String(16), nullable=False)  # positive | negative | redemption
    number_of_points = Column(Integer, nullable=False)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
