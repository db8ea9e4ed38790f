"""Class students API router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.permissions import require_class_role
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import StudentCreate, StudentResponse, StudentUpdate

router = APIRouter(prefix="/api/v1/classes/{class_id}/students", tags=["students"])


@router.get(
    "",
    response_model=List[StudentResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_students(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    return await service.list_students(db, class_id)


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def add_student(
    class_id: str,
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    """Create a student and enroll them in the class."""
    try:
        return await service.add_student(db, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch(
    "/{student_id}",
    response_model=StudentResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_student(
    class_id: str,
    student_id: str,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db),
) -> StudentResponse:
    try:
        return await service.update_student(db, class_id, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{student_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def remove_student(
    class_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove the student from this class with their points, absences and task records."""
    try:
        await service.remove_student(db, class_id, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
