"""Read-only course data access used by the analytics services."""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Protocol

from app.models.course import Assignment, Course, as_utc

logger = logging.getLogger(__name__)


class CourseNotFoundError(ValueError):
    def __init__(self, course_id: str):
        super().__init__(f"Course not found: {course_id}")
        self.course_id = course_id


class CourseDataSource(Protocol):
    """
    What the analytics services need from the persistence layer.

    Implementations return fully populated snapshots; the services call each
    method at most once per course per invocation.
    """

    async def get_course(self, course_id: str) -> Course:
        ...

    async def list_instructor_courses(self, instructor_id: str) -> List[str]:
        ...

    async def get_recent_assignments(self, course_id: str, since: datetime) -> List[Assignment]:
        ...


class InMemoryCourseSource:
    """CourseDataSource over a fixed collection of course snapshots."""

    def __init__(self, courses: Iterable[Course] = ()):
        self._courses: Dict[str, Course] = {course.id: course for course in courses}

    async def get_course(self, course_id: str) -> Course:
        course = self._courses.get(course_id)
        if course is None:
            raise CourseNotFoundError(course_id)
        return course

    async def list_instructor_courses(self, instructor_id: str) -> List[str]:
        return [
            course.id
            for course in self._courses.values()
            if course.instructor_id == instructor_id
        ]

    async def get_recent_assignments(self, course_id: str, since: datetime) -> List[Assignment]:
        """Assignments with submissions at or after `since`, trimmed to those submissions."""
        course = await self.get_course(course_id)
        since = as_utc(since)
        recent = []
        for assignment in course.assignments:
            submissions = tuple(s for s in assignment.submissions if s.submitted_at >= since)
            if submissions:
                recent.append(assignment.model_copy(update={"submissions": submissions}))
        logger.debug(f"Loaded {len(recent)} recent assignment(s) for course {course_id}")
        return recent
