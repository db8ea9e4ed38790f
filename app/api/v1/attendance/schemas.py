from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class AttendanceSave(BaseModel):
    """
    Absent students for a date. Everyone else in scope is present.

    student_ids limits the save to a subset of the class (e.g. one group)
    and absences of students outside it are left untouched. Omitted or
    empty means the whole class.
    """

    date: date
    absent_student_ids: List[str] = Field(default_factory=list)
    student_ids: Optional[List[str]] = None


class AttendanceSaveResult(BaseModel):
    class_id: str
    date: date
    added: int
    removed: int
    absent_student_ids: List[str]


class StudentAttendanceRecord(BaseModel):
    student_id: str
    student_name_en: str
    student_number: Optional[int] = None
    status: str = Field(..., description="present or absent")


class AttendanceDay(BaseModel):
    """Every enrolled student for one date, present unless marked absent."""

    class_id: str
    date: date
    total_present: int
    total_absent: int
    records: List[StudentAttendanceRecord]
