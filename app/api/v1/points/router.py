"""Point ledger API router."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.permissions import require_class_role
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import StudentPointsSummary

router = APIRouter(prefix="/api/v1/classes/{class_id}", tags=["points"])


@router.get(
    "/students/{student_id}/points",
    response_model=StudentPointsSummary,
    dependencies=[Depends(require_class_role())],
)
async def get_student_points(
    class_id: str,
    student_id: str,
    db: AsyncSession = Depends(get_db),
) -> StudentPointsSummary:
    """Balance, positive/negative/redemption subtotals and history of one student."""
    try:
        return await service.get_student_points(db, class_id, student_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/points/{point_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_point(
    class_id: str,
    point_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_point(db, class_id, point_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
