from typing import List

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import get_enrollment
from app.core.exceptions import ServiceError
from app.core.models import Expectation, StudentExpectation

from .schemas import (
    ExpectationCreate,
    ExpectationResponse,
    ExpectationUpdate,
    StudentExpectationResponse,
    StudentExpectationUpdate,
)


async def _get_expectation(db: AsyncSession, class_id: str, expectation_id: str) -> Expectation:
    result = await db.execute(
        select(Expectation).where(Expectation.id == expectation_id, Expectation.class_id == class_id)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Expectation not found", status.HTTP_404_NOT_FOUND)
    return obj


async def list_expectations(db: AsyncSession, class_id: str) -> List[ExpectationResponse]:
    result = await db.execute(
        select(Expectation).where(Expectation.class_id == class_id).order_by(Expectation.created_date)
    )
    return [ExpectationResponse.model_validate(e) for e in result.scalars().all()]


async def create_expectation(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: ExpectationCreate,
) -> ExpectationResponse:
    obj = Expectation(
        class_id=class_id,
        user_id=user_id,
        name=payload.name.strip(),
        description=payload.description,
    )
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return ExpectationResponse.model_validate(obj)


async def update_expectation(
    db: AsyncSession,
    class_id: str,
    expectation_id: str,
    payload: ExpectationUpdate,
) -> ExpectationResponse:
    obj = await _get_expectation(db, class_id, expectation_id)
    if payload.name is not None:
        obj.name = payload.name.strip()
    if payload.description is not None:
        obj.description = payload.description
    await db.commit()
    await db.refresh(obj)
    return ExpectationResponse.model_validate(obj)


async def delete_expectation(db: AsyncSession, class_id: str, expectation_id: str) -> None:
    """Delete the expectation and every student value recorded against it."""
    obj = await _get_expectation(db, class_id, expectation_id)
    await db.execute(
        delete(StudentExpectation)
        .where(StudentExpectation.expectation_id == expectation_id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(obj)
    await db.commit()


async def list_student_expectations(db: AsyncSession, class_id: str) -> List[StudentExpectationResponse]:
    result = await db.execute(
        select(StudentExpectation)
        .where(StudentExpectation.class_id == class_id)
        .order_by(StudentExpectation.created_date)
    )
    return [StudentExpectationResponse.model_validate(se) for se in result.scalars().all()]


async def set_student_expectation(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    expectation_id: str,
    student_id: str,
    payload: StudentExpectationUpdate,
) -> StudentExpectationResponse:
    await _get_expectation(db, class_id, expectation_id)
    if not await get_enrollment(db, class_id, student_id):
        raise ServiceError("Student not found in this class", status.HTTP_404_NOT_FOUND)

    result = await db.execute(
        select(StudentExpectation).where(
            StudentExpectation.expectation_id == expectation_id,
            StudentExpectation.student_id == student_id,
        )
    )
    obj = result.scalar_one_or_none()
    if obj is None:
        obj = StudentExpectation(
            class_id=class_id,
            expectation_id=expectation_id,
            student_id=student_id,
            user_id=user_id,
        )
        db.add(obj)
    data = payload.model_dump(exclude_unset=True)
    if "value" in data:
        obj.value = data["value"]
    if "number" in data:
        obj.number = data["number"]
    obj.user_id = user_id
    await db.commit()
    await db.refresh(obj)
    return StudentExpectationResponse.model_validate(obj)
