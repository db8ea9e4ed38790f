"""Groups and sub-groups of a class. Membership is only ever stored in the join tables."""
from sqlalchemy import Column, DateTime, ForeignKey, String

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Group(Base):
    __tablename__ = "groups"

    group_id = Column(String(64), primary_key=True, default=lambda: generate_id("group_"))
    group_name = Column(String(255), nullable=False)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StudentGroup(Base):
    __tablename__ = "student_groups"

    enrollment_id = Column(String(64), primary_key=True, default=lambda: generate_id("enrollment_"))
    group_id = Column(String(64), ForeignKey("groups.group_id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    enrollment_date = Column(DateTime(timezone=True), default=utcnow, nullable=True)


class SubGroup(Base):
    __tablename__ = "sub_groups"

    sub_group_id = Column(String(64), primary_key=True, default=lambda: generate_id("subgroup_"))
    sub_group_name = Column(String(255), nullable=False)
    group_id = Column(String(64), ForeignKey("groups.group_id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class StudentSubGroup(Base):
    __tablename__ = "student_sub_groups"

    enrollment_id = Column(String(64), primary_key=True, default=lambda: generate_id("enrollment_"))
    sub_group_id = Column(String(64), ForeignKey("sub_groups.sub_group_id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), nullable=False, index=True)
    enrollment_date = Column(DateTime(timezone=True), default=utcnow, nullable=True)
