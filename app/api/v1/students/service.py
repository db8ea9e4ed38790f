from typing import List, Optional

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceError
from app.core.models import (
    AbsentDate,
    Group,
    Point,
    Student,
    StudentAssignment,
    StudentClass,
    StudentExpectation,
    StudentGroup,
    StudentSubGroup,
    SubGroup,
)

from .schemas import StudentCreate, StudentResponse, StudentUpdate


def full_name(first: str, last: Optional[str]) -> str:
    return f"{first.strip()} {(last or '').strip()}".strip()


def build_student(payload: StudentCreate) -> Student:
    """New Student row from a profile payload. Not added to any session."""
    return Student(
        student_name_en=full_name(payload.student_name_first_en, payload.student_name_last_en),
        student_name_first_en=payload.student_name_first_en.strip(),
        student_name_last_en=(payload.student_name_last_en or "").strip(),
        student_name_alt=payload.student_name_alt,
        student_reading_level=payload.student_reading_level,
        student_grade=payload.student_grade,
        student_sex=payload.student_sex.value if payload.student_sex else None,
        student_number=payload.student_number,
        student_email=payload.student_email,
    )


async def enroll_new_student(db: AsyncSession, class_id: str, payload: StudentCreate) -> StudentClass:
    """Create the Student and its enrollment in ``class_id``. Flushes, does not commit."""
    student = build_student(payload)
    db.add(student)
    await db.flush()
    enrollment = StudentClass(student_id=student.student_id, class_id=class_id)
    db.add(enrollment)
    await db.flush()
    return enrollment


def _student_to_response(student: Student, enrollment: StudentClass) -> StudentResponse:
    return StudentResponse(
        student_id=student.student_id,
        class_id=enrollment.class_id,
        student_name_en=student.student_name_en,
        student_name_first_en=student.student_name_first_en,
        student_name_last_en=student.student_name_last_en,
        student_name_alt=student.student_name_alt,
        student_reading_level=student.student_reading_level,
        student_grade=student.student_grade,
        student_sex=student.student_sex,
        student_number=student.student_number,
        student_email=student.student_email,
        enrollment_date=enrollment.enrollment_date,
    )


async def get_enrollment(db: AsyncSession, class_id: str, student_id: str) -> Optional[StudentClass]:
    result = await db.execute(
        select(StudentClass).where(
            StudentClass.class_id == class_id,
            StudentClass.student_id == student_id,
        )
    )
    return result.scalar_one_or_none()


async def enrolled_student_ids(db: AsyncSession, class_id: str) -> List[str]:
    result = await db.execute(select(StudentClass.student_id).where(StudentClass.class_id == class_id))
    return list(result.scalars().all())


async def _require_enrollment(db: AsyncSession, class_id: str, student_id: str) -> StudentClass:
    enrollment = await get_enrollment(db, class_id, student_id)
    if not enrollment:
        raise ServiceError("Student not found in this class", status.HTTP_404_NOT_FOUND)
    return enrollment


async def list_students(db: AsyncSession, class_id: str) -> List[StudentResponse]:
    result = await db.execute(
        select(Student, StudentClass)
        .join(StudentClass, StudentClass.student_id == Student.student_id)
        .where(StudentClass.class_id == class_id)
        .order_by(Student.student_number.nullslast(), Student.student_name_en)
    )
    return [_student_to_response(s, e) for s, e in result.all()]


async def add_student(db: AsyncSession, class_id: str, payload: StudentCreate) -> StudentResponse:
    enrollment = await enroll_new_student(db, class_id, payload)
    await db.commit()
    student = await db.get(Student, enrollment.student_id)
    return _student_to_response(student, enrollment)


async def update_student(
    db: AsyncSession,
    class_id: str,
    student_id: str,
    payload: StudentUpdate,
) -> StudentResponse:
    enrollment = await _require_enrollment(db, class_id, student_id)
    student = await db.get(Student, student_id)
    if not student:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)

    data = payload.model_dump(exclude_unset=True)
    if "student_sex" in data and data["student_sex"] is not None:
        data["student_sex"] = data["student_sex"].value
    for key, value in data.items():
        if key in ("student_name_first_en", "student_name_last_en") and value is not None:
            value = value.strip()
        setattr(student, key, value)
    student.student_name_en = full_name(student.student_name_first_en, student.student_name_last_en)

    await db.commit()
    await db.refresh(student)
    return _student_to_response(student, enrollment)


async def purge_student_from_class(db: AsyncSession, class_id: str, student_id: str) -> None:
    """Delete every class-scoped row of one student, then the enrollment. Does not commit."""
    group_ids = select(Group.group_id).where(Group.class_id == class_id)
    sub_group_ids = select(SubGroup.sub_group_id).where(SubGroup.class_id == class_id)
    statements = [
        delete(StudentGroup).where(StudentGroup.student_id == student_id, StudentGroup.group_id.in_(group_ids)),
        delete(StudentSubGroup).where(
            StudentSubGroup.student_id == student_id, StudentSubGroup.sub_group_id.in_(sub_group_ids)
        ),
        delete(Point).where(Point.class_id == class_id, Point.student_id == student_id),
        delete(AbsentDate).where(AbsentDate.class_id == class_id, AbsentDate.student_id == student_id),
        delete(StudentAssignment).where(
            StudentAssignment.class_id == class_id, StudentAssignment.student_id == student_id
        ),
        delete(StudentExpectation).where(
            StudentExpectation.class_id == class_id, StudentExpectation.student_id == student_id
        ),
        delete(StudentClass).where(StudentClass.class_id == class_id, StudentClass.student_id == student_id),
    ]
    for stmt in statements:
        await db.execute(stmt.execution_options(synchronize_session=False))


async def delete_orphan_students(db: AsyncSession, student_ids: List[str]) -> None:
    """Delete those of ``student_ids`` that are no longer enrolled anywhere. Does not commit."""
    if not student_ids:
        return
    await db.execute(
        delete(Student)
        .where(
            Student.student_id.in_(student_ids),
            Student.student_id.not_in(select(StudentClass.student_id)),
        )
        .execution_options(synchronize_session=False)
    )


async def remove_student(db: AsyncSession, class_id: str, student_id: str) -> None:
    await _require_enrollment(db, class_id, student_id)
    await purge_student_from_class(db, class_id, student_id)
    await delete_orphan_students(db, [student_id])
    await db.commit()
