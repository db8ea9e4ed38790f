from typing import Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import TeacherRole
from app.core.exceptions import ServiceError
from app.core.models import TeacherClass
from app.db.session import get_db

PRIMARY_ONLY_MESSAGE = "Only the primary teacher can perform this action"


async def get_teacher_link(db: AsyncSession, user_id: str, class_id: str) -> Optional[TeacherClass]:
    result = await db.execute(
        select(TeacherClass).where(
            TeacherClass.user_id == user_id,
            TeacherClass.class_id == class_id,
        )
    )
    return result.scalar_one_or_none()


async def ensure_class_role(
    db: AsyncSession,
    user_id: str,
    class_id: str,
    primary_only: bool = False,
) -> TeacherClass:
    """Raise 404 when the class is not linked to the teacher, 403 when an assistant needs to be primary."""
    link = await get_teacher_link(db, user_id, class_id)
    if not link:
        raise ServiceError("Class not found", status.HTTP_404_NOT_FOUND)
    if primary_only and link.role != TeacherRole.PRIMARY.value:
        raise ServiceError(PRIMARY_ONLY_MESSAGE, status.HTTP_403_FORBIDDEN)
    return link


def require_class_role(primary_only: bool = False):
    """
    Dependency factory to enforce the caller's role on the class in the path.

    Example:
        Depends(require_class_role(primary_only=True))
    """

    async def _checker(
        class_id: str,
        current_user: CurrentUser = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> TeacherClass:
        try:
            return await ensure_class_role(db, current_user.id, class_id, primary_only=primary_only)
        except ServiceError as e:
            raise HTTPException(status_code=e.status_code, detail=e.message)

    return _checker
