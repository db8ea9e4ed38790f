from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.exceptions import ServiceError
from app.db.session import get_db

from .schemas import (
    ClassCompletionUpdate,
    ClassCreate,
    ClassJoin,
    ClassRemovalResponse,
    ClassResponse,
    ClassUpdate,
)
from . import service

router = APIRouter(prefix="/api/v1/classes", tags=["classes"])


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_class(
    payload: ClassCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ClassResponse:
    try:
        return await service.create_class(db, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get(
    "",
    response_model=List[ClassResponse],
)
async def list_classes(
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> List[ClassResponse]:
    return await service.list_classes(db, current_user.id)


@router.post(
    "/join",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_class(
    payload: ClassJoin,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ClassResponse:
    """Join another teacher's class by its code, as an assistant."""
    try:
        return await service.join_class(db, current_user.id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.patch(
    "/{class_id}",
    response_model=ClassResponse,
)
async def update_class(
    class_id: str,
    payload: ClassUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ClassResponse:
    try:
        return await service.update_class(db, current_user.id, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/{class_id}/complete",
    response_model=ClassResponse,
)
async def set_completion(
    class_id: str,
    payload: ClassCompletionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ClassResponse:
    """Mark semester 1 and/or semester 2 as complete."""
    try:
        return await service.set_completion(db, current_user.id, class_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/{class_id}",
    response_model=ClassRemovalResponse,
)
async def remove_class(
    class_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> ClassRemovalResponse:
    """Primary teacher deletes the class and its data; an assistant leaves it."""
    try:
        return await service.remove_class(db, current_user.id, class_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
