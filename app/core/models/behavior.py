"""Behaviours, reward items and the achievements attached to them."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.core.identifiers import generate_id
from app.core.models.common import utcnow
from app.db.session import Base


class Behavior(Base):
    """point_value sign decides positive (> 0) or negative (< 0); zero belongs to neither."""

    __tablename__ = "behaviors"

    behavior_id = Column(String(64), primary_key=True, default=lambda: generate_id("behavior_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=True, index=True)
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=True)
    point_value = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(128), nullable=True)
    color = Column(String(32), nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class RewardItem(Base):
    """type: solo | group | class."""

    __tablename__ = "reward_items"

    item_id = Column(String(64), primary_key=True, default=lambda: generate_id("item_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=True, index=True)
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=True)
    price = Column(Integer, nullable=False)
    type = Column(String(16), nullable=False, default="solo")
    description = Column(Text, nullable=True)
    icon = Column(String(128), nullable=True)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


class Achievement(Base):
    """Threshold milestone. Owned by a behaviour or a reward item; both FKs null means orphan."""

    __tablename__ = "achievements"

    id = Column(String(64), primary_key=True, default=lambda: generate_id("achievement_"))
    class_id = Column(String(64), ForeignKey("classes.class_id", ondelete="CASCADE"), nullable=False, index=True)
    behavior_id = Column(String(64), ForeignKey("behaviors.behavior_id", ondelete="CASCADE"), nullable=True, index=True)
    reward_item_id = Column(String(64), ForeignKey("reward_items.item_id", ondelete="CASCADE"), nullable=True, index=True)
    threshold = Column(Integer, nullable=False)
    name = Column(String(255), nullable=False)
    created_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_date = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
