"""Expectations API router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.permissions import require_class_role
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    ExpectationCreate,
    ExpectationResponse,
    ExpectationUpdate,
    StudentExpectationResponse,
    StudentExpectationUpdate,
)

router = APIRouter(prefix="/api/v1/classes/{class_id}/expectations", tags=["expectations"])


@router.get(
    "",
    response_model=List[ExpectationResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_expectations(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[ExpectationResponse]:
    return await service.list_expectations(db, class_id)


@router.post(
    "",
    response_model=ExpectationResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_expectation(
    class_id: str,
    payload: ExpectationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ExpectationResponse:
    return await service.create_expectation(db, current_user.id, class_id, payload)


@router.get(
    "/students",
    response_model=List[StudentExpectationResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_student_expectations(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[StudentExpectationResponse]:
    return await service.list_student_expectations(db, class_id)


@router.patch(
    "/{expectation_id}",
    response_model=ExpectationResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_expectation(
    class_id: str,
    expectation_id: str,
    payload: ExpectationUpdate,
    db: AsyncSession = Depends(get_db),
) -> ExpectationResponse:
    try:
        return await service.update_expectation(db, class_id, expectation_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{expectation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_expectation(
    class_id: str,
    expectation_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_expectation(db, class_id, expectation_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{expectation_id}/students/{student_id}",
    response_model=StudentExpectationResponse,
    dependencies=[Depends(require_class_role())],
)
async def set_student_expectation(
    class_id: str,
    expectation_id: str,
    student_id: str,
    payload: StudentExpectationUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> StudentExpectationResponse:
    """Record a student's value and/or number for this expectation."""
    try:
        return await service.set_student_expectation(
            db, current_user.id, class_id, expectation_id, student_id, payload
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
