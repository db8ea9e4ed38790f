import logging
from typing import List

from fastapi import status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.students.service import enrolled_student_ids
from app.core.exceptions import ServiceError
from app.core.grouping import group_by
from app.core.models import Group, StudentGroup, StudentSubGroup, SubGroup

from .schemas import (
    GroupCreate,
    GroupResponse,
    GroupUpdate,
    SubGroupCreate,
    SubGroupResponse,
    SubGroupUpdate,
)

logger = logging.getLogger(__name__)


async def _enrolled_subset(db: AsyncSession, class_id: str, student_ids: List[str]) -> List[str]:
    """Keep only ids enrolled in the class, first occurrence order, no duplicates."""
    enrolled = set(await enrolled_student_ids(db, class_id))
    kept = list(dict.fromkeys(sid for sid in student_ids if sid in enrolled))
    skipped = set(student_ids) - enrolled
    if skipped:
        logger.warning("Ignoring %d students not enrolled in class %s", len(skipped), class_id)
    return kept


async def _get_group(db: AsyncSession, class_id: str, group_id: str) -> Group:
    result = await db.execute(select(Group).where(Group.group_id == group_id, Group.class_id == class_id))
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Group not found", status.HTTP_404_NOT_FOUND)
    return obj


async def _get_sub_group(db: AsyncSession, class_id: str, group_id: str, sub_group_id: str) -> SubGroup:
    result = await db.execute(
        select(SubGroup).where(
            SubGroup.sub_group_id == sub_group_id,
            SubGroup.group_id == group_id,
            SubGroup.class_id == class_id,
        )
    )
    obj = result.scalar_one_or_none()
    if not obj:
        raise ServiceError("Sub-group not found", status.HTTP_404_NOT_FOUND)
    return obj


async def _member_ids(db: AsyncSession, column, owner_column, owner_id: str, order_column) -> List[str]:
    result = await db.execute(select(column).where(owner_column == owner_id).order_by(order_column))
    return list(result.scalars().all())


async def _sub_group_to_response(db: AsyncSession, obj: SubGroup) -> SubGroupResponse:
    return SubGroupResponse(
        sub_group_id=obj.sub_group_id,
        sub_group_name=obj.sub_group_name,
        group_id=obj.group_id,
        student_ids=await _member_ids(
            db,
            StudentSubGroup.student_id,
            StudentSubGroup.sub_group_id,
            obj.sub_group_id,
            StudentSubGroup.enrollment_date,
        ),
    )


async def _group_to_response(db: AsyncSession, obj: Group) -> GroupResponse:
    result = await db.execute(
        select(SubGroup).where(SubGroup.group_id == obj.group_id).order_by(SubGroup.created_date)
    )
    return GroupResponse(
        group_id=obj.group_id,
        group_name=obj.group_name,
        class_id=obj.class_id,
        student_ids=await _member_ids(
            db, StudentGroup.student_id, StudentGroup.group_id, obj.group_id, StudentGroup.enrollment_date
        ),
        sub_groups=[await _sub_group_to_response(db, s) for s in result.scalars().all()],
    )


async def list_groups(db: AsyncSession, class_id: str) -> List[GroupResponse]:
    groups = (
        await db.execute(select(Group).where(Group.class_id == class_id).order_by(Group.created_date))
    ).scalars().all()
    sub_groups = (
        await db.execute(select(SubGroup).where(SubGroup.class_id == class_id).order_by(SubGroup.created_date))
    ).scalars().all()
    group_ids = [g.group_id for g in groups]
    sub_group_ids = [s.sub_group_id for s in sub_groups]
    members = (
        await db.execute(select(StudentGroup).where(StudentGroup.group_id.in_(group_ids)))
    ).scalars().all() if group_ids else []
    sub_members = (
        await db.execute(select(StudentSubGroup).where(StudentSubGroup.sub_group_id.in_(sub_group_ids)))
    ).scalars().all() if sub_group_ids else []

    members_by_group = group_by(members, lambda m: m.group_id)
    members_by_sub_group = group_by(sub_members, lambda m: m.sub_group_id)
    sub_groups_by_group = group_by(sub_groups, lambda s: s.group_id)
    return [
        GroupResponse(
            group_id=g.group_id,
            group_name=g.group_name,
            class_id=g.class_id,
            student_ids=[m.student_id for m in members_by_group.get(g.group_id, [])],
            sub_groups=[
                SubGroupResponse(
                    sub_group_id=s.sub_group_id,
                    sub_group_name=s.sub_group_name,
                    group_id=s.group_id,
                    student_ids=[m.student_id for m in members_by_sub_group.get(s.sub_group_id, [])],
                )
                for s in sub_groups_by_group.get(g.group_id, [])
            ],
        )
        for g in groups
    ]


async def _replace_group_members(db: AsyncSession, group_id: str, student_ids: List[str]) -> None:
    await db.execute(
        delete(StudentGroup).where(StudentGroup.group_id == group_id).execution_options(synchronize_session=False)
    )
    for student_id in student_ids:
        db.add(StudentGroup(group_id=group_id, student_id=student_id))


async def _replace_sub_group_members(db: AsyncSession, sub_group_id: str, student_ids: List[str]) -> None:
    await db.execute(
        delete(StudentSubGroup)
        .where(StudentSubGroup.sub_group_id == sub_group_id)
        .execution_options(synchronize_session=False)
    )
    for student_id in student_ids:
        db.add(StudentSubGroup(sub_group_id=sub_group_id, student_id=student_id))


# ----- Groups -----
async def create_group(db: AsyncSession, class_id: str, payload: GroupCreate) -> GroupResponse:
    student_ids = await _enrolled_subset(db, class_id, payload.student_ids)
    obj = Group(group_name=payload.group_name.strip(), class_id=class_id)
    db.add(obj)
    await db.flush()
    await _replace_group_members(db, obj.group_id, student_ids)
    await db.commit()
    await db.refresh(obj)
    return await _group_to_response(db, obj)


async def update_group(
    db: AsyncSession,
    class_id: str,
    group_id: str,
    payload: GroupUpdate,
) -> GroupResponse:
    obj = await _get_group(db, class_id, group_id)
    if payload.group_name is not None:
        obj.group_name = payload.group_name.strip()
    if payload.student_ids is not None:
        student_ids = await _enrolled_subset(db, class_id, payload.student_ids)
        await _replace_group_members(db, group_id, student_ids)
    await db.commit()
    await db.refresh(obj)
    return await _group_to_response(db, obj)


async def delete_group(db: AsyncSession, class_id: str, group_id: str) -> None:
    """Delete the group with its sub-groups and every membership row."""
    await _get_group(db, class_id, group_id)
    sub_group_ids = select(SubGroup.sub_group_id).where(SubGroup.group_id == group_id)
    statements = [
        delete(StudentSubGroup).where(StudentSubGroup.sub_group_id.in_(sub_group_ids)),
        delete(SubGroup).where(SubGroup.group_id == group_id),
        delete(StudentGroup).where(StudentGroup.group_id == group_id),
        delete(Group).where(Group.group_id == group_id),
    ]
    for stmt in statements:
        await db.execute(stmt.execution_options(synchronize_session=False))
    await db.commit()


# ----- Sub-groups -----
async def create_sub_group(
    db: AsyncSession,
    class_id: str,
    group_id: str,
    payload: SubGroupCreate,
) -> SubGroupResponse:
    await _get_group(db, class_id, group_id)
    student_ids = await _enrolled_subset(db, class_id, payload.student_ids)
    obj = SubGroup(sub_group_name=payload.sub_group_name.strip(), group_id=group_id, class_id=class_id)
    db.add(obj)
    await db.flush()
    await _replace_sub_group_members(db, obj.sub_group_id, student_ids)
    await db.commit()
    await db.refresh(obj)
    return await _sub_group_to_response(db, obj)


async def update_sub_group(
    db: AsyncSession,
    class_id: str,
    group_id: str,
    sub_group_id: str,
    payload: SubGroupUpdate,
) -> SubGroupResponse:
    obj = await _get_sub_group(db, class_id, group_id, sub_group_id)
    if payload.sub_group_name is not None:
        obj.sub_group_name = payload.sub_group_name.strip()
    if payload.student_ids is not None:
        student_ids = await _enrolled_subset(db, class_id, payload.student_ids)
        await _replace_sub_group_members(db, sub_group_id, student_ids)
    await db.commit()
    await db.refresh(obj)
    return await _sub_group_to_response(db, obj)


async def delete_sub_group(
    db: AsyncSession,
    class_id: str,
    group_id: str,
    sub_group_id: str,
) -> None:
    obj = await _get_sub_group(db, class_id, group_id, sub_group_id)
    await db.execute(
        delete(StudentSubGroup)
        .where(StudentSubGroup.sub_group_id == sub_group_id)
        .execution_options(synchronize_session=False)
    )
    await db.delete(obj)
    await db.commit()
