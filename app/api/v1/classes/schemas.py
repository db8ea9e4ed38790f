from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.api.v1.students.schemas import StudentCreate


class ClassCompletion(BaseModel):
    s1: bool = False
    s2: bool = False


class ClassCreate(BaseModel):
    """Create a class. The caller becomes its primary teacher; students are optional."""

    class_name: str = Field(..., min_length=1, max_length=255)
    class_language: str = Field("en-US", max_length=16)
    class_grade: Optional[str] = Field(None, max_length=16)
    class_year: Optional[str] = Field(None, max_length=16)
    students: List[StudentCreate] = Field(default_factory=list)


class ClassUpdate(BaseModel):
    class_name: Optional[str] = Field(None, min_length=1, max_length=255)
    class_language: Optional[str] = Field(None, max_length=16)
    class_grade: Optional[str] = Field(None, max_length=16)
    class_year: Optional[str] = Field(None, max_length=16)


class ClassCompletionUpdate(BaseModel):
    s1: Optional[bool] = None
    s2: Optional[bool] = None


class ClassJoin(BaseModel):
    class_code: str = Field(..., min_length=1, max_length=16)


class ClassResponse(BaseModel):
    class_id: str
    class_name: str
    class_language: str
    class_grade: Optional[str] = None
    class_year: Optional[str] = None
    class_code: str
    complete: ClassCompletion
    role: str
    assigned_date: datetime
    created_date: datetime
    updated_date: datetime


class ClassRemovalResponse(BaseModel):
    """deleted: the class and its data are gone. left: only the caller's link was removed."""

    class_id: str
    outcome: str
