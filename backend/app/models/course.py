"""Read-only course snapshots consumed by the analytics engine."""

import enum
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"
    LATE = "late"


class Student(Snapshot):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.id


class AttendanceMark(Snapshot):
    student_id: str
    # Plain string so statuses outside AttendanceStatus are still accepted
    status: str


class AttendanceSession(Snapshot):
    held_at: datetime
    marks: Tuple[AttendanceMark, ...] = ()

    @field_validator("held_at")
    @classmethod
    def held_at_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def roster_size(self) -> int:
        return len(self.marks)

    @property
    def present_count(self) -> int:
        return sum(1 for mark in self.marks if mark.status == AttendanceStatus.PRESENT.value)


class Submission(Snapshot):
    student_id: str
    submitted_at: datetime
    total_score: float = 0.0

    @field_validator("submitted_at")
    @classmethod
    def submitted_at_as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Assignment(Snapshot):
    id: str
    course_id: str
    title: str = ""
    type: str = "homework"
    due_date: Optional[datetime] = None
    submissions: Tuple[Submission, ...] = ()

    def latest_submissions(self) -> Dict[str, Submission]:
        """
        Map each student to their submission for this assignment.

        Built in insertion order: when a student appears more than once,
        the last submission in the sequence replaces the earlier ones.
        """
        latest: Dict[str, Submission] = {}
        for submission in self.submissions:
            latest[submission.student_id] = submission
        return latest


class Course(Snapshot):
    id: str
    title: str = ""
    code: Optional[str] = None
    instructor_id: Optional[str] = None
    students: Tuple[Student, ...] = ()
    assignments: Tuple[Assignment, ...] = ()
    attendance: Tuple[AttendanceSession, ...] = ()

    @property
    def total_students(self) -> int:
        return len(self.students)

    def __repr__(self):
        return f"<Course(id='{self.id}', title='{self.title}', students={self.total_students})>"
