"""Attendance service: absences are stored, presence is the default."""

import logging
from datetime import date
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import enrolled_student_ids
from app.core.enums import AttendanceStatus
from app.core.models import AbsentDate, Student, StudentClass

from .schemas import AttendanceDay, AttendanceSave, AttendanceSaveResult, StudentAttendanceRecord

logger = logging.getLogger(__name__)


async def _absent_ids(db: AsyncSession, class_id: str, att_date: date) -> List[str]:
    result = await db.execute(
        select(AbsentDate.student_id).where(AbsentDate.class_id == class_id, AbsentDate.date == att_date)
    )
    return list(result.scalars().all())


async def save_attendance(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: AttendanceSave,
) -> AttendanceSaveResult:
    """
    Make the stored absences for the date match the payload within scope.
    Only the difference is written; ids not enrolled in the class are ignored.
    """
    enrolled = set(await enrolled_student_ids(db, class_id))
    scope = enrolled if not payload.student_ids else enrolled & set(payload.student_ids)
    desired = {sid for sid in payload.absent_student_ids if sid in scope}
    ignored = set(payload.absent_student_ids) - scope
    if ignored:
        logger.warning("Ignoring %d absent ids outside class %s scope", len(ignored), class_id)

    existing = {sid for sid in await _absent_ids(db, class_id, payload.date) if sid in scope}
    to_remove = existing - desired
    to_add = desired - existing

    if to_remove:
        await db.execute(
            delete(AbsentDate)
            .where(
                AbsentDate.class_id == class_id,
                AbsentDate.date == payload.date,
                AbsentDate.student_id.in_(sorted(to_remove)),
            )
            .execution_options(synchronize_session=False)
        )
    for student_id in sorted(to_add):
        db.add(AbsentDate(user_id=user_id, class_id=class_id, student_id=student_id, date=payload.date))
    await db.commit()

    logger.info(
        "Attendance for class %s on %s: %d absences added, %d removed",
        class_id,
        payload.date.isoformat(),
        len(to_add),
        len(to_remove),
    )
    return AttendanceSaveResult(
        class_id=class_id,
        date=payload.date,
        added=len(to_add),
        removed=len(to_remove),
        absent_student_ids=sorted(await _absent_ids(db, class_id, payload.date)),
    )


async def get_attendance_day(db: AsyncSession, class_id: str, att_date: date) -> AttendanceDay:
    result = await db.execute(
        select(Student)
        .join(StudentClass, StudentClass.student_id == Student.student_id)
        .where(StudentClass.class_id == class_id)
        .order_by(Student.student_number.nullslast(), Student.student_name_en)
    )
    students = result.scalars().all()
    absent = set(await _absent_ids(db, class_id, att_date))

    records = [
        StudentAttendanceRecord(
            student_id=s.student_id,
            student_name_en=s.student_name_en,
            student_number=s.student_number,
            status=(AttendanceStatus.ABSENT if s.student_id in absent else AttendanceStatus.PRESENT).value,
        )
        for s in students
    ]
    total_absent = sum(1 for r in records if r.status == AttendanceStatus.ABSENT.value)
    return AttendanceDay(
        class_id=class_id,
        date=att_date,
        total_present=len(records) - total_absent,
        total_absent=total_absent,
        records=records,
    )
