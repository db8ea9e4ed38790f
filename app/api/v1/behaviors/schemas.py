from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.api.v1.points.schemas import PointResponse


# ----- Achievements -----
class AchievementInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    threshold: int = Field(..., ge=1)


class AchievementResponse(BaseModel):
    id: str
    class_id: str
    behavior_id: Optional[str] = None
    reward_item_id: Optional[str] = None
    name: str
    threshold: int

    class Config:
        from_attributes = True


# ----- Behaviours -----
class BehaviorCreate(BaseModel):
    """point_value must not be zero: its sign makes the behaviour positive or negative."""

    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    point_value: int
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=128)
    color: Optional[str] = Field(None, max_length=32)
    achievements: List[AchievementInput] = Field(default_factory=list)


class BehaviorUpdate(BaseModel):
    """achievements, when given, replaces the behaviour's achievements."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    point_value: Optional[int] = None
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=128)
    color: Optional[str] = Field(None, max_length=32)
    achievements: Optional[List[AchievementInput]] = None


class BehaviorResponse(BaseModel):
    behavior_id: str
    class_id: Optional[str] = None
    user_id: str
    name: str
    title: Optional[str] = None
    point_value: int
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None
    created_date: datetime
    updated_date: datetime
    achievements: List[AchievementResponse] = Field(default_factory=list)


class BehaviorCategories(BaseModel):
    positive: List[BehaviorResponse]
    negative: List[BehaviorResponse]


class BehaviorApply(BaseModel):
    student_ids: List[str] = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class BehaviorApplyResponse(BaseModel):
    behavior_id: str
    transactions: List[PointResponse]
