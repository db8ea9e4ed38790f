"""Groups and sub-groups API router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.permissions import require_class_role
from app.core.exceptions import ServiceError
from app.db.session import get_db

from . import service
from .schemas import (
    GroupCreate,
    GroupResponse,
    GroupUpdate,
    SubGroupCreate,
    SubGroupResponse,
    SubGroupUpdate,
)

router = APIRouter(prefix="/api/v1/classes/{class_id}/groups", tags=["groups"])


# ----- Groups -----
@router.get(
    "",
    response_model=List[GroupResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_groups(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[GroupResponse]:
    return await service.list_groups(db, class_id)


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_group(
    class_id: str,
    payload: GroupCreate,
    db: AsyncSession = Depends(get_db),
) -> GroupResponse:
    try:
        return await service.create_group(db, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{group_id}",
    response_model=GroupResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_group(
    class_id: str,
    group_id: str,
    payload: GroupUpdate,
    db: AsyncSession = Depends(get_db),
) -> GroupResponse:
    """Rename the group and/or replace its members."""
    try:
        return await service.update_group(db, class_id, group_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_group(
    class_id: str,
    group_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_group(db, class_id, group_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# ----- Sub-groups -----
@router.post(
    "/{group_id}/sub-groups",
    response_model=SubGroupResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_sub_group(
    class_id: str,
    group_id: str,
    payload: SubGroupCreate,
    db: AsyncSession = Depends(get_db),
) -> SubGroupResponse:
    try:
        return await service.create_sub_group(db, class_id, group_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{group_id}/sub-groups/{sub_group_id}",
    response_model=SubGroupResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_sub_group(
    class_id: str,
    group_id: str,
    sub_group_id: str,
    payload: SubGroupUpdate,
    db: AsyncSession = Depends(get_db),
) -> SubGroupResponse:
    try:
        return await service.update_sub_group(db, class_id, group_id, sub_group_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{group_id}/sub-groups/{sub_group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_sub_group(
    class_id: str,
    group_id: str,
    sub_group_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_sub_group(db, class_id, group_id, sub_group_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
