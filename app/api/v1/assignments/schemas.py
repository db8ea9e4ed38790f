from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ----- Topics -----
class TopicCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class TopicResponse(BaseModel):
    id: str
    class_id: str
    user_id: str
    name: str
    created_date: datetime

    class Config:
        from_attributes = True


# ----- Assignments -----
class AssignmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    data: Optional[str] = None
    due_date: Optional[datetime] = None
    topic: Optional[str] = Field(None, description="Topic id")
    working_date: Optional[datetime] = None


class AssignmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    data: Optional[str] = None
    due_date: Optional[datetime] = None
    topic: Optional[str] = None
    working_date: Optional[datetime] = None


class AssignmentCompletion(BaseModel):
    student_id: str
    complete: bool
    completed_ts: Optional[datetime] = None


class AssignmentResponse(BaseModel):
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
    students: List[AssignmentCompletion] = Field(default_factory=list)


class CompletionUpdate(BaseModel):
    complete: bool
