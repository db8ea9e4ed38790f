"""Assignments and topics API router."""

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
    AssignmentCompletion,
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    CompletionUpdate,
    TopicCreate,
    TopicResponse,
)

router = APIRouter(prefix="/api/v1/classes/{class_id}", tags=["assignments"])


# ----- Topics -----
@router.get(
    "/topics",
    response_model=List[TopicResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_topics(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[TopicResponse]:
    return await service.list_topics(db, class_id)


@router.post(
    "/topics",
    response_model=TopicResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_topic(
    class_id: str,
    payload: TopicCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> TopicResponse:
    return await service.create_topic(db, current_user.id, class_id, payload)


@router.delete(
    "/topics/{topic_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_topic(
    class_id: str,
    topic_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_topic(db, class_id, topic_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


# ----- Assignments -----
@router.get(
    "/assignments",
    response_model=List[AssignmentResponse],
    dependencies=[Depends(require_class_role())],
)
async def list_assignments(
    class_id: str,
    db: AsyncSession = Depends(get_db),
) -> List[AssignmentResponse]:
    return await service.list_assignments(db, class_id)


@router.post(
    "/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def create_assignment(
    class_id: str,
    payload: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
) -> AssignmentResponse:
    return await service.create_assignment(db, current_user.id, class_id, payload)


@router.patch(
    "/assignments/{assignment_id}",
    response_model=AssignmentResponse,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def update_assignment(
    class_id: str,
    assignment_id: str,
    payload: AssignmentUpdate,
    db: AsyncSession = Depends(get_db),
) -> AssignmentResponse:
    try:
        return await service.update_assignment(db, class_id, assignment_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete(
    "/assignments/{assignment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_class_role(primary_only=True))],
)
async def delete_assignment(
    class_id: str,
    assignment_id: str,
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_assignment(db, class_id, assignment_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put(
    "/assignments/{assignment_id}/students/{student_id}",
    response_model=AssignmentCompletion,
    dependencies=[Depends(require_class_role())],
)
async def set_completion(
    class_id: str,
    assignment_id: str,
    student_id: str,
    payload: CompletionUpdate,
    db: AsyncSession = Depends(get_db),
) -> AssignmentCompletion:
    """Mark one student's assignment complete or not complete."""
    try:
        return await service.set_completion(db, class_id, assignment_id, student_id, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
