from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel


# ----- Ledger -----
class PointHistoryEntry(BaseModel):
    id: str
    user_id: str
    class_id: str
    student_id: str
    behavior_id: Optional[str] = None
    reward_item_id: Optional[str] = None
    type: str
    number_of_points: int
    created_date: datetime


class RedemptionEntry(BaseModel):
    item_id: Optional[str] = None
    date: datetime
    quantity: int


# ----- Students -----
class StudentData(BaseModel):
    """A student enriched with ledger and attendance, as seen from one class."""

    student_id: str
    student_name_en: str
    student_name_first_en: str
    student_name_last_en: str
    student_name_alt: Optional[str] = None
    student_reading_level: Optional[str] = None
    student_grade: Optional[str] = None
    student_sex: Optional[str] = None
    student_number: Optional[int] = None
    student_email: Optional[str] = None
    enrollment_date: Optional[datetime] = None
    points: int
    point_history: List[PointHistoryEntry]
    redemption_history: List[RedemptionEntry]
    absent_dates: List[date]


class SubGroupData(BaseModel):
    sub_group_id: str
    sub_group_name: str
    group_id: str
    students: List[StudentData]


class GroupData(BaseModel):
    group_id: str
    group_name: str
    students: List[StudentData]
    sub_groups: List[SubGroupData]


# ----- Catalogue -----
class AchievementData(BaseModel):
    id: str
    class_id: str
    behavior_id: Optional[str] = None
    reward_item_id: Optional[str] = None
    threshold: int
    name: str
    created_date: datetime
    updated_date: datetime


class BehaviorData(BaseModel):
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
    achievements: List[AchievementData]


class RewardItemData(BaseModel):
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
    achievements: List[AchievementData]


# ----- Tasks -----
class TopicData(BaseModel):
    id: str
    class_id: str
    user_id: str
    name: str
    created_date: datetime
    updated_date: datetime


class AssignmentStudentData(BaseModel):
    student_id: str
    complete: bool
    completed_ts: Optional[datetime] = None


class AssignmentData(BaseModel):
    id: str
    user_id: str
    class_id: str
    name: str
    description: Optional[str] = None
    data: Optional[str] = None
    due_date: Optional[datetime] = None
    topic: Optional[str] = None
    working_date: Optional[datetime] = None
    created_date: datetime
    updated_date: datetime
    students: List[AssignmentStudentData]


class ExpectationData(BaseModel):
    id: str
    class_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    created_date: datetime
    updated_date: datetime


class StudentExpectationData(BaseModel):
    id: str
    class_id: str
    expectation_id: str
    student_id: str
    user_id: str
    value: Optional[str] = None
    number: Optional[int] = None
    created_date: datetime
    updated_date: datetime


# ----- Class -----
class ClassCompletion(BaseModel):
    s1: bool
    s2: bool


class ClassRoster(BaseModel):
    """One class with everything the dashboard renders for it."""

    class_id: str
    class_name: str
    class_language: str
    class_grade: Optional[str] = None
    class_year: Optional[str] = None
    class_code: str
    created_date: datetime
    updated_date: datetime
    complete: ClassCompletion
    role: str
    assigned_date: datetime
    groups: List[GroupData]
    students: List[StudentData]
    reward_items: List[RewardItemData]
    behaviors: List[BehaviorData]
    topics: List[TopicData]
    assignments: List[AssignmentData]
    expectations: List[ExpectationData]
    student_expectations: List[StudentExpectationData]


class RosterErrorResponse(BaseModel):
    message: str
