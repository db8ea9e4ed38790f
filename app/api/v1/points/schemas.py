from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class PointResponse(BaseModel):
    id: str
    user_id: str
    class_id: str
    student_id: str
    behavior_id: Optional[str] = None
    reward_item_id: Optional[str] = None
    type: str
    number_of_points: int
    created_date: datetime

    class Config:
        from_attributes = True


class RedemptionResponse(BaseModel):
    item_id: Optional[str] = None
    date: datetime
    quantity: int


class StudentPointsSummary(BaseModel):
    """Balance of one student in one class with the per-type subtotals."""

    class_id: str
    student_id: str
    points: int
    positive: int
    negative: int
    redemption: int
    point_history: List[PointResponse]
    redemption_history: List[RedemptionResponse]
