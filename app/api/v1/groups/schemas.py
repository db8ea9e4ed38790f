from typing import List, Optional

from pydantic import BaseModel, Field


class GroupCreate(BaseModel):
    group_name: str = Field(..., min_length=1, max_length=255)
    student_ids: List[str] = Field(default_factory=list)


class GroupUpdate(BaseModel):
    """student_ids, when given, replaces the whole membership."""

    group_name: Optional[str] = Field(None, min_length=1, max_length=255)
    student_ids: Optional[List[str]] = None


class SubGroupCreate(BaseModel):
    sub_group_name: str = Field(..., min_length=1, max_length=255)
    student_ids: List[str] = Field(default_factory=list)


class SubGroupUpdate(BaseModel):
    sub_group_name: Optional[str] = Field(None, min_length=1, max_length=255)
    student_ids: Optional[List[str]] = None


class SubGroupResponse(BaseModel):
    sub_group_id: str
    sub_group_name: str
    group_id: str
    student_ids: List[str]


class GroupResponse(BaseModel):
    group_id: str
    group_name: str
    class_id: str
    student_ids: List[str]
    sub_groups: List[SubGroupResponse] = Field(default_factory=list)
