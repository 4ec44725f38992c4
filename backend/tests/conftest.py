"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from app.models.course import (
    Assignment,
    AttendanceMark,
    AttendanceSession,
    Course,
    Student,
    Submission,
)


NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time for trend calculations."""
    return NOW


@pytest.fixture
def make_submission(now):
    """Build a submission `days_ago` days before the reference time."""
    def _make(student_id, total_score=0.0, days_ago=1.0):
        return Submission(
            student_id=student_id,
            submitted_at=now - timedelta(days=days_ago),
            total_score=total_score,
        )
    return _make


@pytest.fixture
def make_assignment():
    """Build an assignment holding the given submissions in order."""
    counter = {"n": 0}

    def _make(*submissions, course_id="course-1", title=None):
        counter["n"] += 1
        assignment_id = f"assignment-{counter['n']}"
        return Assignment(
            id=assignment_id,
            course_id=course_id,
            title=title or assignment_id,
            submissions=submissions,
        )
    return _make


@pytest.fixture
def make_session(now):
    """Build an attendance session from (student_id, status) pairs."""
    def _make(*pairs, days_ago=0):
        return AttendanceSession(
            held_at=now - timedelta(days=days_ago),
            marks=tuple(AttendanceMark(student_id=sid, status=status) for sid, status in pairs),
        )
    return _make


@pytest.fixture
def roster():
    """Two enrolled students."""
    return (
        Student(id="alice", first_name="Alice", last_name="Moreau"),
        Student(id="bob", first_name="Bob"),
    )


@pytest.fixture
def sample_course(roster, make_assignment, make_submission, make_session):
    """A course with two students, two assignments and two sessions."""
    assignments = (
        make_assignment(
            make_submission("alice", 90, days_ago=2),
            make_submission("bob", 30, days_ago=9),
        ),
        make_assignment(
            make_submission("alice", 70, days_ago=3),
        ),
    )
    attendance = (
        make_session(("alice", "present"), ("bob", "absent"), days_ago=7),
        make_session(("alice", "present"), ("bob", "present"), days_ago=1),
    )
    return Course(
        id="course-1",
        title="Algorithms",
        code="CS201",
        instructor_id="prof-1",
        students=roster,
        assignments=assignments,
        attendance=attendance,
    )
