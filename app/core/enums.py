from enum import Enum


class TeacherRole(str, Enum):
    PRIMARY = "primary"
    ASSISTANT = "assistant"


class PointType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    REDEMPTION = "redemption"


class RewardItemType(str, Enum):
    SOLO = "solo"
    GROUP = "group"
    CLASS = "class"


class StudentSex(str, Enum):
    MALE = "male"
    FEMALE = "female"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
