from typing import List

from fastapi import status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.behaviors.service import achievements_for, replace_achievements
from app.api.v1.points.schemas import PointResponse
from app.api.v1.points.service import write_transactions
from app.core.enums import PointType
from app.core.exceptions import ServiceError
from app.core.models import Achievement, RewardItem

from .schemas import (
    RewardItemCreate,
    RewardItemResponse,
    RewardItemUpdate,
    RewardRedeem,
    RewardRedeemResponse,
)


def _item_to_response(item: RewardItem, achievements) -> RewardItemResponse:
    return RewardItemResponse(
        item_id=item.item_id,
        class_id=item.class_id,
        user_id=item.user_id,
        name=item.name,
        title=item.title,
        price=item.price,
        type=item.type,
        description=item.description,
        icon=item.icon,
        created_date=item.created_date,
        updated_date=item.updated_date,
        achievements=achievements,
    )


async def _get_item(db: AsyncSession, class_id: str, item_id: str) -> RewardItem:
    result = await db.execute(
        select(RewardItem).where(RewardItem.item_id == item_id, RewardItem.class_id == class_id)
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Reward item not found", status.HTTP_404_NOT_FOUND)
    return obj


async def _to_response(db: AsyncSession, obj: RewardItem) -> RewardItemResponse:
    achievements = await achievements_for(db, Achievement.reward_item_id, [obj.item_id])
    return _item_to_response(obj, achievements.get(obj.item_id, []))


async def list_reward_items(db: AsyncSession, class_id: str) -> List[RewardItemResponse]:
    result = await db.execute(
        select(RewardItem).where(RewardItem.class_id == class_id).order_by(RewardItem.price, RewardItem.item_id)
    )
    items = result.scalars().all()
    achievements = await achievements_for(db, Achievement.reward_item_id, [i.item_id for i in items])
    return [_item_to_response(i, achievements.get(i.item_id, [])) for i in items]


async def create_reward_item(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    payload: RewardItemCreate,
) -> RewardItemResponse:
    obj = RewardItem(
        class_id=class_id,
        user_id=user_id,
        name=payload.name.strip(),
        title=payload.title,
        price=payload.price,
        type=payload.type.value,
        description=payload.description,
        icon=payload.icon,
    )
    db.add(obj)
    await db.flush()
    await replace_achievements(db, class_id, payload.achievements, reward_item_id=obj.item_id)
    await db.commit()
    await db.refresh(obj)
    return await _to_response(db, obj)


async def update_reward_item(
    db: AsyncSession,
    class_id: str,
    item_id: str,
    payload: RewardItemUpdate,
) -> RewardItemResponse:
    obj = await _get_item(db, class_id, item_id)
    if payload.name is not None:
        obj.name = payload.name.strip()
    if payload.title is not None:
        obj.title = payload.title
    if payload.price is not None:
        obj.price = payload.price
    if payload.type is not None:
        obj.type = payload.type.value
    if payload.description is not None:
        obj.description = payload.description
    if payload.icon is not None:
        obj.icon = payload.icon
    if payload.achievements is not None:
        await replace_achievements(db, class_id, payload.achievements, reward_item_id=item_id)
    await db.commit()
    await db.refresh(obj)
    return await _to_response(db, obj)


async def delete_reward_item(db: AsyncSession, class_id: str, item_id: str) -> None:
    obj = await _get_item(db, class_id, item_id)
    await replace_achievements(db, class_id, [], reward_item_id=item_id)
    await db.delete(obj)
    await db.commit()


async def redeem(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    item_id: str,
    payload: RewardRedeem,
) -> RewardRedeemResponse:
    """Spend price x quantity points per student; recorded as a negative redemption."""
    item = await _get_item(db, class_id, item_id)
    rows = await write_transactions(
        db,
        user_id=user_id,
        class_id=class_id,
        student_ids=payload.student_ids,
        point_type=PointType.REDEMPTION,
        number_of_points=-item.price * payload.quantity,
        reward_item_id=item_id,
    )
    await db.commit()
    return RewardRedeemResponse(item_id=item_id, transactions=[PointResponse.model_validate(p) for p in rows])
