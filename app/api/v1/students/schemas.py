from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from app.core.enums import StudentSex


class StudentBase(BaseModel):
    student_name_first_en: str = Field(..., min_length=1, max_length=255)
    student_name_last_en: str = Field("", max_length=255)
    student_name_alt: Optional[str] = Field(None, max_length=255)
    student_reading_level: Optional[str] = Field(None, max_length=32)
    student_grade: Optional[str] = Field(None, max_length=16)
    student_sex: Optional[StudentSex] = None
    student_number: Optional[int] = None
    student_email: Optional[EmailStr] = None


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    student_name_first_en: Optional[str] = Field(None, min_length=1, max_length=255)
    student_name_last_en: Optional[str] = Field(None, max_length=255)
    student_name_alt: Optional[str] = Field(None, max_length=255)
    student_reading_level: Optional[str] = Field(None, max_length=32)
    student_grade: Optional[str] = Field(None, max_length=16)
    student_sex: Optional[StudentSex] = None
    student_number: Optional[int] = None
    student_email: Optional[EmailStr] = None


class StudentResponse(BaseModel):
    student_id: str
    class_id: str
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
