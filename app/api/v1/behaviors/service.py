from typing import Dict, List, Optional, Sequence

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.points.schemas import PointResponse
from app.api.v1.points.service import write_transactions
from app.core.enums import PointType
from app.core.exceptions import ServiceError
from app.core.grouping import group_by
from app.core.models import Achievement, Behavior

from .schemas import (
    AchievementInput,
    AchievementResponse,
    BehaviorApply,
    BehaviorApplyResponse,
    BehaviorCategories,
    BehaviorCreate,
    BehaviorResponse,
    BehaviorUpdate,
)


def _check_point_value(point_value: int) -> None:
    if point_value == 0:
        raise ServiceError("Behaviour point value must be positive or negative, not zero", status.HTTP_400_BAD_REQUEST)


def categorize(behaviors: Sequence[BehaviorResponse]) -> Dict[str, List[BehaviorResponse]]:
    """Split by sign of point_value. Zero-valued legacy rows belong to neither list."""
    return {
        "positive": [b for b in behaviors if b.point_value > 0],
        "negative": [b for b in behaviors if b.point_value < 0],
    }


# ----- Achievements -----
async def replace_achievements(
    db: AsyncSession,
    class_id: str,
    items: List[AchievementInput],
    *,
    behavior_id: Optional[str] = None,
    reward_item_id: Optional[str] = None,
) -> None:
    """Swap the achievements owned by exactly one behaviour or reward item. Does not commit."""
    if (behavior_id is None) == (reward_item_id is None):
        raise ValueError("Achievements need exactly one owner")
    owner_column = Achievement.behavior_id if behavior_id else Achievement.reward_item_id
    owner_id = behavior_id or reward_item_id
    await db.execute(
        delete(Achievement).where(owner_column == owner_id).execution_options(synchronize_session=False)
    )
    for item in items:
        db.add(
            Achievement(
                class_id=class_id,
                behavior_id=behavior_id,
                reward_item_id=reward_item_id,
                name=item.name.strip(),
                threshold=item.threshold,
            )
        )
    await db.flush()


async def achievements_for(db: AsyncSession, owner_column, owner_ids: List[str]) -> Dict[str, List[AchievementResponse]]:
    if not owner_ids:
        return {}
    result = await db.execute(
        select(Achievement).where(owner_column.in_(owner_ids)).order_by(Achievement.threshold, Achievement.id)
    )
    grouped = group_by(result.scalars().all(), lambda a: getattr(a, owner_column.key))
    return {k: [AchievementResponse.model_validate(a) for a in v] for k, v in grouped.items()}


# ----- Behaviours -----
def _behavior_to_response(b: Behavior, achievements: List[AchievementResponse]) -> BehaviorResponse:
    return BehaviorResponse(
        behavior_id=b.behavior_id,
        class_id=b.class_id,
        user_id=b.user_id,
        name=b.name,
        title=b.title,
        point_value=b.point_value,
        description=b.description,
        icon=b.icon,
        color=b.color,
        created_date=b.created_date,
        updated_date=b.updated_date,
        achievements=achievements,
    )


async def _get_behavior(db: AsyncSession, class_id: str, behavior_id: str) -> Behavior:
    result = await db.execute(
        select(Behavior).where(Behavior.behavior_id == behavior_id, Behavior.class_id == class_id)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Behaviour not found", status.HTTP_404_NOT_FOUND)
    return obj


async def _to_response(db: AsyncSession, obj: Behavior) -> BehaviorResponse:
    achievements = await achievements_for(db, Achievement.behavior_id, [obj.behavior_id])
    return _behavior_to_response(obj, achievements.get(obj.behavior_id, []))


async def list_behaviors(db: AsyncSession, class_id: str) -> List[BehaviorResponse]:
    result = await db.execute(
        select(Behavior).where(Behavior.class_id == class_id).order_by(Behavior.created_date, Behavior.behavior_id)
    )
    behaviors = result.scalars().all()
    achievements = await achievements_for(db, Achievement.behavior_id, [b.behavior_id for b in behaviors])
    return [_behavior_to_response(b, achievements.get(b.behavior_id, [])) for b in behaviors]


async def list_categorized(db: AsyncSession, class_id: str) -> BehaviorCategories:
    return BehaviorCategories(**categorize(await list_behaviors(db, class_id)))


async def create_behavior(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: BehaviorCreate,
) -> BehaviorResponse:
    _check_point_value(payload.point_value)
    obj = Behavior(
        class_id=class_id,
        user_id=user_id,
        name=payload.name.strip(),
        title=payload.title,
        point_value=payload.point_value,
        description=payload.description,
        icon=payload.icon,
        color=payload.color,
    )
    db.add(obj)
    await db.flush()
    await replace_achievements(db, class_id, payload.achievements, behavior_id=obj.behavior_id)
    await db.commit()
    await db.refresh(obj)
    return await _to_response(db, obj)


async def update_behavior(
    db: AsyncSession,
    class_id: str,
    behavior_id: str,
    payload: BehaviorUpdate,
) -> BehaviorResponse:
    obj = await _get_behavior(db, class_id, behavior_id)
    data = payload.model_dump(exclude_unset=True, exclude={"achievements"})
    if data.get("point_value") is not None:
        _check_point_value(data["point_value"])
    for key, value in data.items():
        if value is None and key in ("name", "point_value"):
            continue
        setattr(obj, key, value)
    if payload.achievements is not None:
        await replace_achievements(db, class_id, payload.achievements, behavior_id=behavior_id)
    await db.commit()
    await db.refresh(obj)
    return await _to_response(db, obj)


async def delete_behavior(db: AsyncSession, class_id: str, behavior_id: str) -> None:
    """Delete the behaviour and its achievements. Ledger rows keep their behavior_id."""
    obj = await _get_behavior(db, class_id, behavior_id)
    await replace_achievements(db, class_id, [], behavior_id=behavior_id)
    await db.delete(obj)
    await db.commit()


async def apply_behavior(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    behavior_id: str,
    payload: BehaviorApply,
) -> BehaviorApplyResponse:
    """Award (or deduct) point_value x quantity to each student."""
    behavior = await _get_behavior(db, class_id, behavior_id)
    _check_point_value(behavior.point_value)
    point_type = PointType.POSITIVE if behavior.point_value > 0 else PointType.NEGATIVE
    rows = await write_transactions(
        db,
        user_id=user_id,
        class_id=class_id,
        student_ids=payload.student_ids,
        point_type=point_type,
        number_of_points=behavior.point_value * payload.quantity,
        behavior_id=behavior_id,
    )
    await db.commit()
    return BehaviorApplyResponse(
        behavior_id=behavior_id,
        transactions=[PointResponse.model_validate(p) for p in rows],
    )
