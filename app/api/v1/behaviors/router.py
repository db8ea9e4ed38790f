"""Behaviours API router."""

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
    BehaviorApply,
    BehaviorApplyResponse,
    BehaviorCategories,
    BehaviorCreate,
    BehaviorResponse,
    BehaviorUpdate,
)

router = APIRouter(prefix="/api/v1/classes/{class_id}/behaviors", tags=["behaviors"])


@router.get(
    "",
    response_model=List[BehaviorResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_behaviors(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[BehaviorResponse]:
    return await service.list_behaviors(db, class_id)


@router.get(
    "/categorized",
    response_model=BehaviorCategories,
    dependencies=[Depends(require_class_role())],
)
async def list_categorized(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> BehaviorCategories:
    """Behaviours split into positive and negative by point value."""
    return await service.list_categorized(db, class_id)


@router.post(
    "",
    response_model=BehaviorResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_behavior(
    class_id: str,
    payload: BehaviorCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> BehaviorResponse:
    try:
        return await service.create_behavior(db, current_user.id, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch(
    "/{behavior_id}",
    response_model=BehaviorResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_behavior(
    class_id: str,
    behavior_id: str,
    payload: BehaviorUpdate,
    db: AsyncSession = Depends(get_db),
) -> BehaviorResponse:
    try:
        return await service.update_behavior(db, class_id, behavior_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{behavior_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_behavior(
    class_id: str,
    behavior_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_behavior(db, class_id, behavior_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post(
    "/{behavior_id}/apply",
    response_model=BehaviorApplyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role())],
)
async def apply_behavior(
    class_id: str,
    behavior_id: str,
    payload: BehaviorApply,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> BehaviorApplyResponse:
    """Record the behaviour for the selected students, quantity times."""
    try:
        return await service.apply_behavior(db, current_user.id, class_id, behavior_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
