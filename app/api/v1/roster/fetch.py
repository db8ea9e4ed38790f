"""
Bulk reads for the roster aggregation.

Phase 1 reads the caller's classes with their role. Phase 2 runs one bulk
read per entity type concurrently, each on its own session, scoped by the
phase 1 class ids. Group membership is the only dependent read: it waits for
the group and sub-group ids. A failure anywhere propagates and no partial
result is returned.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.core.models import (
    AbsentDate,
    Achievement,
    Assignment,
    Behavior,
    Expectation,
    Group,
    Point,
    RewardItem,
    SchoolClass,
    Student,
    StudentAssignment,
    StudentClass,
    StudentExpectation,
    StudentGroup,
    StudentSubGroup,
    SubGroup,
    TeacherClass,
    Topic,
)

logger = logging.getLogger(__name__)


@dataclass
class TeacherClassRow:
    school_class: SchoolClass
    link: TeacherClass


@dataclass
class RosterRows:
    """Flat rows for every entity of the caller's classes."""

    classes: List[TeacherClassRow] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    sub_groups: List[SubGroup] = field(default_factory=list)
    student_groups: List[StudentGroup] = field(default_factory=list)
    student_sub_groups: List[StudentSubGroup] = field(default_factory=list)
    students: List[Student] = field(default_factory=list)
    enrollments: List[StudentClass] = field(default_factory=list)
    points: List[Point] = field(default_factory=list)
    absences: List[AbsentDate] = field(default_factory=list)
    reward_items: List[RewardItem] = field(default_factory=list)
    behaviors: List[Behavior] = field(default_factory=list)
    achievements: List[Achievement] = field(default_factory=list)
    topics: List[Topic] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    student_assignments: List[StudentAssignment] = field(default_factory=list)
    expectations: List[Expectation] = field(default_factory=list)
    student_expectations: List[StudentExpectation] = field(default_factory=list)

    @property
    def class_ids(self) -> List[str]:
        return [row.school_class.class_id for row in self.classes]


async def _select_all(session_factory: async_sessionmaker, stmt) -> List[Any]:
    # An AsyncSession cannot run statements concurrently; each read gets its own.
    async with session_factory() as session:
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def _select_in(session_factory: async_sessionmaker, model, column, ids: Sequence[str], *order_by) -> List[Any]:
    if not ids:
        return []
    stmt = select(model).where(column.in_(list(ids))).order_by(*order_by)
    return await _select_all(session_factory, stmt)


async def fetch_teacher_classes(session_factory: async_sessionmaker, user_id: str) -> List[TeacherClassRow]:
    async with session_factory() as session:
        result = await session.execute(
            select(SchoolClass, TeacherClass)
            .join(TeacherClass, TeacherClass.class_id == SchoolClass.class_id)
            .where(TeacherClass.user_id == user_id)
            .order_by(TeacherClass.assigned_date, SchoolClass.class_id)
        )
        return [TeacherClassRow(school_class=c, link=link) for c, link in result.all()]


async def _fetch_groups_with_members(session_factory: async_sessionmaker, class_ids: List[str]):
    groups, sub_groups = await asyncio.gather(
        _select_in(session_factory, Group, Group.class_id, class_ids, Group.created_date, Group.group_id),
        _select_in(
            session_factory, SubGroup, SubGroup.class_id, class_ids, SubGroup.created_date, SubGroup.sub_group_id
        ),
    )
    student_groups, student_sub_groups = await asyncio.gather(
        _select_in(
            session_factory,
            StudentGroup,
            StudentGroup.group_id,
            [g.group_id for g in groups],
            StudentGroup.enrollment_date,
            StudentGroup.enrollment_id,
        ),
        _select_in(
            session_factory,
            StudentSubGroup,
            StudentSubGroup.sub_group_id,
            [s.sub_group_id for s in sub_groups],
            StudentSubGroup.enrollment_date,
            StudentSubGroup.enrollment_id,
        ),
    )
    return groups, sub_groups, student_groups, student_sub_groups


async def fetch_roster_rows(session_factory: async_sessionmaker, user_id: str) -> RosterRows:
    classes = await fetch_teacher_classes(session_factory, user_id)
    rows = RosterRows(classes=classes)
    if not classes:
        return rows

    class_ids = rows.class_ids
    (
        group_rows,
        rows.students,
        rows.enrollments,
        rows.points,
        rows.absences,
        rows.reward_items,
        rows.behaviors,
        rows.achievements,
        rows.topics,
        rows.assignments,
        rows.student_assignments,
        rows.expectations,
        rows.student_expectations,
    ) = await asyncio.gather(
        _fetch_groups_with_members(session_factory, class_ids),
        # Students are global; enrollment decides who belongs where.
        _select_all(session_factory, select(Student).order_by(Student.student_id)),
        _select_in(
            session_factory,
            StudentClass,
            StudentClass.class_id,
            class_ids,
            StudentClass.enrollment_date,
            StudentClass.enrollment_id,
        ),
        _select_in(session_factory, Point, Point.class_id, class_ids, Point.created_date, Point.id),
        _select_in(session_factory, AbsentDate, AbsentDate.class_id, class_ids, AbsentDate.date, AbsentDate.id),
        _select_in(
            session_factory, RewardItem, RewardItem.class_id, class_ids, RewardItem.created_date, RewardItem.item_id
        ),
        _select_in(
            session_factory, Behavior, Behavior.class_id, class_ids, Behavior.created_date, Behavior.behavior_id
        ),
        _select_in(
            session_factory, Achievement, Achievement.class_id, class_ids, Achievement.threshold, Achievement.id
        ),
        _select_in(session_factory, Topic, Topic.class_id, class_ids, Topic.created_date, Topic.id),
        _select_in(
            session_factory, Assignment, Assignment.class_id, class_ids, Assignment.created_date, Assignment.id
        ),
        _select_in(
            session_factory,
            StudentAssignment,
            StudentAssignment.class_id,
            class_ids,
            StudentAssignment.created_date,
            StudentAssignment.id,
        ),
        _select_in(
            session_factory, Expectation, Expectation.class_id, class_ids, Expectation.created_date, Expectation.id
        ),
        _select_in(
            session_factory,
            StudentExpectation,
            StudentExpectation.class_id,
            class_ids,
            StudentExpectation.created_date,
            StudentExpectation.id,
        ),
    )
    rows.groups, rows.sub_groups, rows.student_groups, rows.student_sub_groups = group_rows

    logger.debug(
        "Fetched roster rows for %d classes: %d enrollments, %d points, %d groups",
        len(classes),
        len(rows.enrollments),
        len(rows.points),
        len(rows.groups),
    )
    return rows
