from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ExpectationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class ExpectationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class ExpectationResponse(BaseModel):
    id: str
    class_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    created_date: datetime
    updated_date: datetime

    class Config:
        from_attributes = True


class StudentExpectationUpdate(BaseModel):
    """Free-text value and/or a number; fields left out keep their stored value."""

    value: Optional[str] = None
    number: Optional[int] = None


class StudentExpectationResponse(BaseModel):
    id: str
    class_id: str
    expectation_id: str
    student_id: str
    user_id: str
    value: Optional[str] = None
    number: Optional[int] = None
    updated_date: datetime

    class Config:
        from_attributes = True
