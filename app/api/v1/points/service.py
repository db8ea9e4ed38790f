import logging
from typing import List, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.roster.ledger import reduce_ledger, summarize_by_type
from app.api.v1.students.service import enrolled_student_ids, get_enrollment
from app.core.enums import PointType
from app.core.exceptions import ServiceError
from app.core.models import Point

from .schemas import PointResponse, RedemptionResponse, StudentPointsSummary

logger = logging.getLogger(__name__)


async def write_transactions(
    db: AsyncSession,
    *,
    user_id: str,
    class_id: str,
    student_ids: List[str],
    point_type: PointType,
    number_of_points: int,
    behavior_id: Optional[str] = None,
    reward_item_id: Optional[str] = None,
) -> List[Point]:
    """
    Append one ledger row per student. Every student must be enrolled in the
    class. Flushes, does not commit.
    """
    targets = list(dict.fromkeys(student_ids))
    enrolled = set(await enrolled_student_ids(db, class_id))
    missing = [sid for sid in targets if sid not in enrolled]
    if missing:
        raise ServiceError(
            f"Students not enrolled in this class: {', '.join(missing)}",
            status.HTTP_400_BAD_REQUEST,
        )
    rows = [
        Point(
            user_id=user_id,
            class_id=class_id,
            student_id=student_id,
            behavior_id=behavior_id,
            reward_item_id=reward_item_id,
            type=point_type.value,
            number_of_points=number_of_points,
        )
        for student_id in targets
    ]
    db.add_all(rows)
    await db.flush()
    logger.info(
        "User %s wrote %d %s transactions of %d points in class %s",
        user_id,
        len(rows),
        point_type.value,
        number_of_points,
        class_id,
    )
    return rows


async def get_student_points(db: AsyncSession, class_id: str, student_id: str) -> StudentPointsSummary:
    if not await get_enrollment(db, class_id, student_id):
        raise ServiceError("Student not found in this class", status.HTTP_404_NOT_FOUND)
    result = await db.execute(
        select(Point)
        .where(Point.class_id == class_id, Point.student_id == student_id)
        .order_by(Point.created_date, Point.id)
    )
    transactions = result.scalars().all()
    ledger = reduce_ledger(transactions)
    totals = summarize_by_type(transactions)
    return StudentPointsSummary(
        class_id=class_id,
        student_id=student_id,
        points=ledger.points,
        positive=totals[PointType.POSITIVE.value],
        negative=totals[PointType.NEGATIVE.value],
        redemption=totals[PointType.REDEMPTION.value],
        point_history=[PointResponse(**entry) for entry in ledger.point_history],
        redemption_history=[RedemptionResponse(**entry) for entry in ledger.redemption_history],
    )


async def delete_point(db: AsyncSession, class_id: str, point_id: str) -> None:
    """Undo a single transaction."""
    result = await db.execute(select(Point).where(Point.id == point_id, Point.class_id == class_id))
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Point transaction not found", status.HTTP_404_NOT_FOUND)
    await db.delete(obj)
    await db.commit()
