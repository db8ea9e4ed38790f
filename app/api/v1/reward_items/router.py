"""Reward items API router."""

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
    RewardItemCreate,
    RewardItemResponse,
    RewardItemUpdate,
    RewardRedeem,
    RewardRedeemResponse,
)

router = APIRouter(prefix="/api/v1/classes/{class_id}/reward-items", tags=["reward-items"])


@router.get(
    "",
    response_model=List[RewardItemResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_reward_items(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[RewardItemResponse]:
    return await service.list_reward_items(db, class_id)


@router.post(
    "",
    response_model=RewardItemResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_reward_item(
    class_id: str,
    payload: RewardItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> RewardItemResponse:
    try:
        return await service.create_reward_item(db, current_user.id, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch(
    "/{item_id}",
    response_model=RewardItemResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_reward_item(
    class_id: str,
    item_id: str,
    payload: RewardItemUpdate,
    db: AsyncSession = Depends(get_db),
) -> RewardItemResponse:
    try:
        return await service.update_reward_item(db, class_id, item_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_reward_item(
    class_id: str,
    item_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_reward_item(db, class_id, item_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/{item_id}/redeem",
    response_model=RewardRedeemResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role())],
)
async def redeem(
    class_id: str,
    item_id: str,
    payload: RewardRedeem,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> RewardRedeemResponse:
    try:
        return await service.redeem(db, current_user.id, class_id, item_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
