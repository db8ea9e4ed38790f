from typing import List

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import get_enrollment
from app.core.exceptions import ServiceError
from app.core.grouping import group_by
from app.core.models import Assignment, StudentAssignment, Topic
from app.core.models.common import utcnow

from .schemas import (
    AssignmentCompletion,
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    CompletionUpdate,
    TopicCreate,
    TopicResponse,
)


def _completion(sa: StudentAssignment) -> AssignmentCompletion:
    return AssignmentCompletion(student_id=sa.student_id, complete=bool(sa.complete), completed_ts=sa.completed_ts)


def _assignment_to_response(a: Assignment, completions: List[StudentAssignment]) -> AssignmentResponse:
    return AssignmentResponse(
        id=a.id,
        user_id=a.user_id,
        class_id=a.class_id,
        name=a.name,
        description=a.description,
        data=a.data,
        due_date=a.due_date,
        topic=a.topic,
        working_date=a.working_date,
        created_date=a.created_date,
        updated_date=a.updated_date,
        students=[_completion(sa) for sa in completions],
    )


async def _get_assignment(db: AsyncSession, class_id: str, assignment_id: str) -> Assignment:
    result = await db.execute(
        select(Assignment).where(Assignment.id == assignment_id, Assignment.class_id == class_id)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Assignment not found", status.HTTP_404_NOT_FOUND)
    return obj


async def _completions(db: AsyncSession, assignment_ids: List[str]) -> List[StudentAssignment]:
    if not assignment_ids:
        return []
    result = await db.execute(
        select(StudentAssignment)
        .where(StudentAssignment.assignment_id.in_(assignment_ids))
        .order_by(StudentAssignment.created_date, StudentAssignment.id)
    )
    return list(result.scalars().all())


# ----- Topics -----
async def list_topics(db: AsyncSession, class_id: str) -> List[TopicResponse]:
    result = await db.execute(select(Topic).where(Topic.class_id == class_id).order_by(Topic.created_date))
    return [TopicResponse.model_validate(t) for t in result.scalars().all()]


async def create_topic(db: AsyncSession, user_id: str, class_id: str, payload: TopicCreate) -> TopicResponse:
    obj = Topic(class_id=class_id, user_id=user_id, name=payload.name.strip())
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return TopicResponse.model_validate(obj)


async def delete_topic(db: AsyncSession, class_id: str, topic_id: str) -> None:
    result = await db.execute(select(Topic).where(Topic.id == topic_id, Topic.class_id == class_id))
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Topic not found", status.HTTP_404_NOT_FOUND)
    await db.delete(obj)
    await db.commit()


# ----- Assignments -----
async def list_assignments(db: AsyncSession, class_id: str) -> List[AssignmentResponse]:
    result = await db.execute(
        select(Assignment).where(Assignment.class_id == class_id).order_by(Assignment.created_date, Assignment.id)
    )
    assignments = result.scalars().all()
    by_assignment = group_by(await _completions(db, [a.id for a in assignments]), lambda sa: sa.assignment_id)
    return [_assignment_to_response(a, by_assignment.get(a.id, [])) for a in assignments]


async def create_assignment(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: AssignmentCreate,
) -> AssignmentResponse:
    obj = Assignment(
        user_id=user_id,
        class_id=class_id,
        name=payload.name.strip(),
        description=payload.description,
        data=payload.data,
        due_date=payload.due_date,
        topic=payload.topic,
        working_date=payload.working_date,
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return _assignment_to_response(obj, [])


async def update_assignment(
    db: AsyncSession,
    class_id: str,
    assignment_id: str,
    payload: AssignmentUpdate,
) -> AssignmentResponse:
    obj = await _get_assignment(db, class_id, assignment_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "name":
            if value is None:
                continue
            value = value.strip()
        setattr(obj, key, value)
    await db.commit()
    await db.refresh(obj)
    return _assignment_to_response(obj, await _completions(db, [obj.id]))


async def delete_assignment(db: AsyncSession, class_id: str, assignment_id: str) -> None:
    """Delete the assignment and every completion record for it."""
    obj = await _get_assignment(db, class_id, assignment_id)
    await db.execute(
        delete(StudentAssignment)
        .where(StudentAssignment.assignment_id == assignment_id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(obj)
    await db.commit()


async def set_completion(
    db: AsyncSession,
    class_id: str,
    assignment_id: str,
    student_id: str,
    payload: CompletionUpdate,
) -> AssignmentCompletion:
    """Upsert one student's completion; the timestamp is kept only while complete."""
    await _get_assignment(db, class_id, assignment_id)
    if not await get_enrollment(db, class_id, student_id):
        raise ServiceError("Student not found in this class", status.HTTP_404_NOT_FOUND)

    result = await db.execute(
        select(StudentAssignment).where(
            StudentAssignment.assignment_id == assignment_id,
            StudentAssignment.student_id == student_id,
        )
    )
    obj = result.scalar_one_or_none()
    if obj is None:
        obj = StudentAssignment(class_id=class_id, assignment_id=assignment_id, student_id=student_id)
        db.add(obj)
    obj.complete = payload.complete
    obj.completed_ts = utcnow() if payload.complete else None
    await db.commit()
    await db.refresh(obj)
    return _completion(obj)
