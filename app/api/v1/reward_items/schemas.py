from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.api.v1.behaviors.schemas import AchievementInput, AchievementResponse
from app.api.v1.points.schemas import PointResponse
from app.core.enums import RewardItemType


class RewardItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    price: int = Field(..., gt=0)
    type: RewardItemType = RewardItemType.SOLO
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=128)
    achievements: List[AchievementInput] = Field(default_factory=list)


class RewardItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    price: Optional[int] = Field(None, gt=0)
    type: Optional[RewardItemType] = None
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=128)
    achievements: Optional[List[AchievementInput]] = None


class RewardItemResponse(BaseModel):
    item_id: str
    class_id: Optional[str] = None
    user_id: str
    name: str
    title: Optional[str] = None
    price: int
    type: str
    description: Optional[str] = None
    icon: Optional[str] = None
    created_date: datetime
    updated_date: datetime
    achievements: List[AchievementResponse] = Field(default_factory=list)


class RewardRedeem(BaseModel):
    student_ids: List[str] = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)


class RewardRedeemResponse(BaseModel):
    item_id: str
    transactions: List[PointResponse]
