"""
Graph assembly for the roster aggregation.

Flat rows from the fetch layer are indexed once with ``group_by`` and then
stitched into one composite record per class. Everything here is pure and
synchronous; nothing is read from or written to the database.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from app.api.v1.roster.fetch import RosterRows, TeacherClassRow
from app.api.v1.roster.ledger import reduce_ledger
from app.core.grouping import group_by

logger = logging.getLogger(__name__)

STUDENT_PROFILE_FIELDS = (
    "student_id",
    "student_name_en",
    "student_name_first_en",
    "student_name_last_en",
    "student_name_alt",
    "student_reading_level",
    "student_grade",
    "student_sex",
    "student_number",
    "student_email",
)

BEHAVIOR_FIELDS = (
    "behavior_id",
    "class_id",
    "user_id",
    "name",
    "title",
    "point_value",
    "description",
    "icon",
    "color",
    "created_date",
    "updated_date",
)

REWARD_ITEM_FIELDS = (
    "item_id",
    "class_id",
    "user_id",
    "name",
    "title",
    "price",
    "type",
    "description",
    "icon",
    "created_date",
    "updated_date",
)


def row_to_dict(row: Any) -> Dict[str, Any]:
    """All mapped columns of an ORM row, by attribute name."""
    return {column.key: getattr(row, column.key) for column in row.__table__.columns}


def _pick(row: Any, names) -> Dict[str, Any]:
    return {name: getattr(row, name) for name in names}


# ----- Achievement ownership -----


@dataclass(frozen=True)
class AchievementOwner:
    """
    Which catalogue entries an achievement hangs off.

    A row may belong to a behaviour, a reward item or both; each owner
    lists it. A row with neither foreign key set is an orphan and is
    left out of the roster.
    """

    behavior_id: Optional[str] = None
    reward_item_id: Optional[str] = None

    @classmethod
    def of(cls, achievement: Any) -> "AchievementOwner":
        return cls(achievement.behavior_id, achievement.reward_item_id)

    @property
    def is_orphan(self) -> bool:
        return self.behavior_id is None and self.reward_item_id is None


def _owner_key(attr: str):
    def key(achievement):
        return getattr(AchievementOwner.of(achievement), attr)

    return key


# ----- Indices -----


@dataclass
class RosterIndex:
    groups_by_class: Dict[str, list] = field(default_factory=dict)
    sub_groups_by_group: Dict[str, list] = field(default_factory=dict)
    members_by_group: Dict[str, list] = field(default_factory=dict)
    members_by_sub_group: Dict[str, list] = field(default_factory=dict)
    enrollments_by_class: Dict[str, list] = field(default_factory=dict)
    students_by_id: Dict[str, Any] = field(default_factory=dict)
    points_by_student: Dict[Tuple[str, str], list] = field(default_factory=dict)
    absences_by_student: Dict[Tuple[str, str], list] = field(default_factory=dict)
    behaviors_by_class: Dict[str, list] = field(default_factory=dict)
    reward_items_by_class: Dict[str, list] = field(default_factory=dict)
    achievements_by_behavior: Dict[str, list] = field(default_factory=dict)
    achievements_by_reward_item: Dict[str, list] = field(default_factory=dict)
    topics_by_class: Dict[str, list] = field(default_factory=dict)
    assignments_by_class: Dict[str, list] = field(default_factory=dict)
    completions_by_assignment: Dict[str, list] = field(default_factory=dict)
    expectations_by_class: Dict[str, list] = field(default_factory=dict)
    student_expectations_by_class: Dict[str, list] = field(default_factory=dict)


def build_index(rows: RosterRows) -> RosterIndex:
    by_class = lambda r: r.class_id  # noqa: E731
    by_class_student = lambda r: (r.class_id, r.student_id)  # noqa: E731

    orphans = [a.id for a in rows.achievements if AchievementOwner.of(a).is_orphan]
    if orphans:
        logger.debug("Skipping %d achievements with no owner: %s", len(orphans), orphans)

    return RosterIndex(
        groups_by_class=group_by(rows.groups, by_class),
        sub_groups_by_group=group_by(rows.sub_groups, lambda s: s.group_id),
        members_by_group=group_by(rows.student_groups, lambda m: m.group_id),
        members_by_sub_group=group_by(rows.student_sub_groups, lambda m: m.sub_group_id),
        enrollments_by_class=group_by(rows.enrollments, by_class),
        students_by_id={s.student_id: s for s in rows.students},
        points_by_student=group_by(rows.points, by_class_student),
        absences_by_student=group_by(rows.absences, by_class_student),
        behaviors_by_class=group_by(rows.behaviors, by_class),
        reward_items_by_class=group_by(rows.reward_items, by_class),
        achievements_by_behavior=group_by(rows.achievements, _owner_key("behavior_id")),
        achievements_by_reward_item=group_by(rows.achievements, _owner_key("reward_item_id")),
        topics_by_class=group_by(rows.topics, by_class),
        assignments_by_class=group_by(rows.assignments, by_class),
        completions_by_assignment=group_by(rows.student_assignments, lambda sa: sa.assignment_id),
        expectations_by_class=group_by(rows.expectations, by_class),
        student_expectations_by_class=group_by(rows.student_expectations, by_class),
    )


# ----- Student enrichment -----


class StudentEnricher:
    """
    Builds the enriched student record (profile, ledger, absences) once per
    (class, student) and hands out independent copies, so a student who sits
    in several groups is computed a single time.
    """

    def __init__(self, index: RosterIndex):
        self._index = index
        self._cache: Dict[Tuple[str, str], Optional[Dict[str, Any]]] = {}

    def _build(self, class_id: str, student_id: str) -> Optional[Dict[str, Any]]:
        student = self._index.students_by_id.get(student_id)
        if student is None:
            return None
        key = (class_id, student_id)
        ledger = reduce_ledger(self._index.points_by_student.get(key, []))
        record = _pick(student, STUDENT_PROFILE_FIELDS)
        record.update(
            points=ledger.points,
            point_history=ledger.point_history,
            redemption_history=ledger.redemption_history,
            absent_dates=[a.date for a in self._index.absences_by_student.get(key, [])],
        )
        return record

    def get(self, class_id: str, student_id: str, enrollment_date) -> Optional[Dict[str, Any]]:
        key = (class_id, student_id)
        if key not in self._cache:
            self._cache[key] = self._build(class_id, student_id)
        base = self._cache[key]
        if base is None:
            return None
        record = copy.deepcopy(base)
        record["enrollment_date"] = enrollment_date
        return record


def _member_students(enricher: StudentEnricher, class_id: str, members: List[Any], container: str) -> List[Dict]:
    students = []
    for member in members:
        record = enricher.get(class_id, member.student_id, member.enrollment_date)
        if record is None:
            logger.warning(
                "Dropping %s member %s of class %s: student row not found",
                container,
                member.student_id,
                class_id,
            )
            continue
        students.append(record)
    return students


# ----- Per-class sections -----


def _groups(class_id: str, index: RosterIndex, enricher: StudentEnricher) -> List[Dict]:
    groups = []
    for group in index.groups_by_class.get(class_id, []):
        sub_groups = [
            {
                "sub_group_id": sub_group.sub_group_id,
                "sub_group_name": sub_group.sub_group_name,
                "group_id": sub_group.group_id,
                "students": _member_students(
                    enricher, class_id, index.members_by_sub_group.get(sub_group.sub_group_id, []), "sub-group"
                ),
            }
            for sub_group in index.sub_groups_by_group.get(group.group_id, [])
        ]
        groups.append(
            {
                "group_id": group.group_id,
                "group_name": group.group_name,
                "students": _member_students(enricher, class_id, index.members_by_group.get(group.group_id, []), "group"),
                "sub_groups": sub_groups,
            }
        )
    return groups


def _behaviors(class_id: str, index: RosterIndex) -> List[Dict]:
    behaviors = []
    for behavior in index.behaviors_by_class.get(class_id, []):
        record = _pick(behavior, BEHAVIOR_FIELDS)
        record["achievements"] = [row_to_dict(a) for a in index.achievements_by_behavior.get(behavior.behavior_id, [])]
        behaviors.append(record)
    return behaviors


def _reward_items(class_id: str, index: RosterIndex) -> List[Dict]:
    items = []
    for item in index.reward_items_by_class.get(class_id, []):
        record = _pick(item, REWARD_ITEM_FIELDS)
        record["achievements"] = [row_to_dict(a) for a in index.achievements_by_reward_item.get(item.item_id, [])]
        items.append(record)
    return items


def _assignments(class_id: str, index: RosterIndex) -> List[Dict]:
    assignments = []
    for assignment in index.assignments_by_class.get(class_id, []):
        record = row_to_dict(assignment)
        record["students"] = [
            {
                "student_id": sa.student_id,
                "complete": bool(sa.complete),
                "completed_ts": sa.completed_ts,
            }
            for sa in index.completions_by_assignment.get(assignment.id, [])
        ]
        assignments.append(record)
    return assignments


def assemble_class(row: TeacherClassRow, index: RosterIndex, enricher: StudentEnricher) -> Dict[str, Any]:
    school_class = row.school_class
    class_id = school_class.class_id
    return {
        "class_id": class_id,
        "class_name": school_class.class_name,
        "class_language": school_class.class_language,
        "class_grade": school_class.class_grade,
        "class_year": school_class.class_year,
        "class_code": school_class.class_code,
        "created_date": school_class.created_date,
        "updated_date": school_class.updated_date,
        "complete": {"s1": bool(school_class.complete_s1), "s2": bool(school_class.complete_s2)},
        "role": row.link.role,
        "assigned_date": row.link.assigned_date,
        "groups": _groups(class_id, index, enricher),
        "students": _member_students(enricher, class_id, index.enrollments_by_class.get(class_id, []), "class"),
        "reward_items": _reward_items(class_id, index),
        "behaviors": _behaviors(class_id, index),
        "topics": [row_to_dict(t) for t in index.topics_by_class.get(class_id, [])],
        "assignments": _assignments(class_id, index),
        "expectations": [row_to_dict(e) for e in index.expectations_by_class.get(class_id, [])],
        "student_expectations": [row_to_dict(se) for se in index.student_expectations_by_class.get(class_id, [])],
    }


def assemble_roster(rows: RosterRows) -> List[Dict[str, Any]]:
    """One composite record per class, in phase 1 order."""
    index = build_index(rows)
    enricher = StudentEnricher(index)
    return [assemble_class(row, index, enricher) for row in rows.classes]
