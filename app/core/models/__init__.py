from app.core.models.class_model import SchoolClass, TeacherClass
from app.core.models.student import Student, StudentClass
from app.core.models.group import Group, StudentGroup, StudentSubGroup, SubGroup
from app.core.models.behavior import Achievement, Behavior, RewardItem
from app.core.models.point import Point
from app.core.models.absent_date import AbsentDate
from app.core.models.assignment import Assignment, StudentAssignment, Topic
from app.core.models.expectation import Expectation, StudentExpectation

__all__ = [
    "AbsentDate",
    "Achievement",
    "Assignment",
    "Behavior",
    "Expectation",
    "Group",
    "Point",
    "RewardItem",
    "SchoolClass",
    "Student",
    "StudentAssignment",
    "StudentClass",
    "StudentExpectation",
    "StudentGroup",
    "StudentSubGroup",
    "SubGroup",
    "TeacherClass",
    "Topic",
]
