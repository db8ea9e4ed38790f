"""Attendance API router."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.permissions import require_class_role
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import AttendanceDay, AttendanceSave, AttendanceSaveResult

router = APIRouter(prefix="/api/v1/classes/{class_id}/attendance", tags=["attendance"])


@router.put(
    "",
    response_model=AttendanceSaveResult,
    dependencies=[Depends(require_class_role())],
)
async def save_attendance(
    class_id: str,
    payload: AttendanceSave,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> AttendanceSaveResult:
    """Save the absent list for a date. Re-saving the same list changes nothing."""
    try:
        return await service.save_attendance(db, current_user.id, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=AttendanceDay,
    dependencies=[Depends(require_class_role())],
)
async def get_attendance_day(
    class_id: str,
    att_date: date = Query(..., alias="date", description="Attendance date"),
    db: AsyncSession = Depends(get_db),
) -> AttendanceDay:
    """Every enrolled student for the date; present unless marked absent."""
    try:
        return await service.get_attendance_day(db, class_id, att_date)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
