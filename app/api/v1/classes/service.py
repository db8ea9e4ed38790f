import logging
from typing import List

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import delete_orphan_students, enroll_new_student, enrolled_student_ids
from app.auth.permissions import ensure_class_role
from app.core.enums import TeacherRole
from app.core.exceptions import ServiceError
from app.core.identifiers import generate_class_code
from app.core.models import (
    AbsentDate,
    Achievement,
    Assignment,
    Behavior,
    Expectation,
    Group,
    Point,
    RewardItem,
    SchoolClass,
    StudentAssignment,
    StudentClass,
    StudentExpectation,
    StudentGroup,
    StudentSubGroup,
    SubGroup,
    TeacherClass,
    Topic,
)

from .schemas import (
    ClassCompletion,
    ClassCompletionUpdate,
    ClassCreate,
    ClassJoin,
    ClassRemovalResponse,
    ClassResponse,
    ClassUpdate,
)

logger = logging.getLogger(__name__)

CLASS_CODE_ATTEMPTS = 10


def _class_to_response(c: SchoolClass, link: TeacherClass) -> ClassResponse:
    return ClassResponse(
        class_id=c.class_id,
        class_name=c.class_name,
        class_language=c.class_language,
        class_grade=c.class_grade,
        class_year=c.class_year,
        class_code=c.class_code,
        complete=ClassCompletion(s1=bool(c.complete_s1), s2=bool(c.complete_s2)),
        role=link.role,
        assigned_date=link.assigned_date,
        created_date=c.created_date,
        updated_date=c.updated_date,
    )


async def _unique_class_code(db: AsyncSession) -> str:
    for _ in range(CLASS_CODE_ATTEMPTS):
        code = generate_class_code()
        result = await db.execute(select(SchoolClass.class_id).where(SchoolClass.class_code == code))
        if result.scalar_one_or_none() is None:
            return code
    raise ServiceError("Could not allocate a class code, please retry", status.HTTP_503_SERVICE_UNAVAILABLE)


async def _get_class(db: AsyncSession, class_id: str) -> SchoolClass:
    obj = await db.get(SchoolClass, class_id)
    if not obj:
        raise ServiceError("Class not found", status.HTTP_404_NOT_FOUND)
    return obj


async def create_class(
    db: AsyncSession,
    user_id: str,
    payload: ClassCreate,
) -> ClassResponse:
    """Create the class, link the caller as primary teacher and enroll the initial students in one commit."""
    try:
        obj = SchoolClass(
            class_name=payload.class_name.strip(),
            class_language=payload.class_language or "en-US",
            class_grade=payload.class_grade,
            class_year=payload.class_year,
            class_code=await _unique_class_code(db),
        )
        db.add(obj)
        await db.flush()
        link = TeacherClass(user_id=user_id, class_id=obj.class_id, role=TeacherRole.PRIMARY.value)
        db.add(link)
        for student in payload.students:
            await enroll_new_student(db, obj.class_id, student)
        await db.commit()
        await db.refresh(obj)
        await db.refresh(link)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("Class code already in use, please retry", status.HTTP_409_CONFLICT)
    logger.info("User %s created class %s with %d students", user_id, obj.class_id, len(payload.students))
    return _class_to_response(obj, link)


async def list_classes(db: AsyncSession, user_id: str) -> List[ClassResponse]:
    result = await db.execute(
        select(SchoolClass, TeacherClass)
        .join(TeacherClass, TeacherClass.class_id == SchoolClass.class_id)
        .where(TeacherClass.user_id == user_id)
        .order_by(TeacherClass.assigned_date, SchoolClass.class_id)
    )
    return [_class_to_response(c, link) for c, link in result.all()]


async def update_class(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: ClassUpdate,
) -> ClassResponse:
    link = await ensure_class_role(db, user_id, class_id, primary_only=True)
    obj = await _get_class(db, class_id)
    if payload.class_name is not None:
        obj.class_name = payload.class_name.strip()
    if payload.class_language is not None:
        obj.class_language = payload.class_language
    if payload.class_grade is not None:
        obj.class_grade = payload.class_grade
    if payload.class_year is not None:
        obj.class_year = payload.class_year
    await db.commit()
    await db.refresh(obj)
    return _class_to_response(obj, link)


async def set_completion(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: ClassCompletionUpdate,
) -> ClassResponse:
    link = await ensure_class_role(db, user_id, class_id, primary_only=True)
    obj = await _get_class(db, class_id)
    if payload.s1 is not None:
        obj.complete_s1 = payload.s1
    if payload.s2 is not None:
        obj.complete_s2 = payload.s2
    await db.commit()
    await db.refresh(obj)
    return _class_to_response(obj, link)


async def join_class(db: AsyncSession, user_id: str, payload: ClassJoin) -> ClassResponse:
    """Link the caller to the class with this code as an assistant teacher."""
    code = payload.class_code.strip().upper()
    result = await db.execute(select(SchoolClass).where(SchoolClass.class_code == code))
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("No class found with this code", status.HTTP_404_NOT_FOUND)
    existing = await db.execute(
        select(TeacherClass.assignment_id).where(
            TeacherClass.user_id == user_id,
            TeacherClass.class_id == obj.class_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ServiceError("You are already a teacher of this class", status.HTTP_409_CONFLICT)
    try:
        link = TeacherClass(user_id=user_id, class_id=obj.class_id, role=TeacherRole.ASSISTANT.value)
        db.add(link)
        await db.commit()
        await db.refresh(link)
    except IntegrityError:
        await db.rollback()
        raise ServiceError("You are already a teacher of this class", status.HTTP_409_CONFLICT)
    return _class_to_response(obj, link)


async def purge_class(db: AsyncSession, class_id: str) -> None:
    """Delete the class and every row scoped to it, children first. Does not commit."""
    student_ids = await enrolled_student_ids(db, class_id)
    group_ids = select(Group.group_id).where(Group.class_id == class_id)
    sub_group_ids = select(SubGroup.sub_group_id).where(SubGroup.class_id == class_id)
    statements = [
        delete(StudentGroup).where(StudentGroup.group_id.in_(group_ids)),
        delete(StudentSubGroup).where(StudentSubGroup.sub_group_id.in_(sub_group_ids)),
        delete(SubGroup).where(SubGroup.class_id == class_id),
        delete(Group).where(Group.class_id == class_id),
        delete(Achievement).where(Achievement.class_id == class_id),
        delete(Point).where(Point.class_id == class_id),
        delete(AbsentDate).where(AbsentDate.class_id == class_id),
        delete(StudentAssignment).where(StudentAssignment.class_id == class_id),
        delete(StudentExpectation).where(StudentExpectation.class_id == class_id),
        delete(Topic).where(Topic.class_id == class_id),
        delete(Assignment).where(Assignment.class_id == class_id),
        delete(Expectation).where(Expectation.class_id == class_id),
        delete(RewardItem).where(RewardItem.class_id == class_id),
        delete(Behavior).where(Behavior.class_id == class_id),
        delete(StudentClass).where(StudentClass.class_id == class_id),
        delete(TeacherClass).where(TeacherClass.class_id == class_id),
        delete(SchoolClass).where(SchoolClass.class_id == class_id),
    ]
    for stmt in statements:
        await db.execute(stmt.execution_options(synchronize_session=False))
    await delete_orphan_students(db, student_ids)


async def remove_class(db: AsyncSession, user_id: str, class_id: str) -> ClassRemovalResponse:
    """
    Primary teacher: delete the class with all its data.
    Assistant: only unlink the caller from the class.
    """
    link = await ensure_class_role(db, user_id, class_id)
    if link.role == TeacherRole.PRIMARY.value:
        await purge_class(db, class_id)
        await db.commit()
        logger.info("User %s deleted class %s", user_id, class_id)
        return ClassRemovalResponse(class_id=class_id, outcome="deleted")

    await db.delete(link)
    await db.commit()
    logger.info("User %s left class %s", user_id, class_id)
    return ClassRemovalResponse(class_id=class_id, outcome="left")
