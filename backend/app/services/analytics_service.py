"""Analytics service for the instructor course and dashboard views."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from app.config import settings
from app.models.course import Assignment, AttendanceSession, Course, Student, as_utc
from app.schemas.analytics import (
    CourseAnalytics,
    CourseEngagement,
    DashboardAnalytics,
    RecentSubmission,
    ScoreBucket,
    ScoreDistribution,
)
from app.services.course_source import CourseDataSource

logger = logging.getLogger(__name__)

ENGAGEMENT_WEEKS = 4
WEEK = timedelta(days=7)
ENGAGEMENT_WINDOW = ENGAGEMENT_WEEKS * WEEK


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return as_utc(now)


def calculate_average_attendance(sessions: Sequence[AttendanceSession]) -> float:
    """
    Percentage of "present" marks across all sessions.

    The denominator is the number of sessions times the roster size of the
    first session, even when later sessions have a different number of marks.
    """
    if not sessions:
        return 0.0

    expected = len(sessions) * sessions[0].roster_size
    if expected == 0:
        return 0.0

    present = sum(session.present_count for session in sessions)
    return present / expected * 100


def calculate_assignment_completion(assignments: Sequence[Assignment]) -> Dict[str, float]:
    """
    Completion percentage for every student with at least one submission.

    Students who never submitted are left out of the result entirely.
    """
    total_assignments = len(assignments)
    if total_assignments == 0:
        return {}

    completed: Dict[str, int] = {}
    for assignment in assignments:
        for student_id in assignment.latest_submissions():
            completed[student_id] = completed.get(student_id, 0) + 1

    return {
        student_id: count / total_assignments * 100
        for student_id, count in completed.items()
    }


def calculate_student_averages(
    students: Sequence[Student],
    assignments: Sequence[Assignment],
) -> Dict[str, float]:
    """Average score per roster student, counting a missing submission as 0."""
    if not assignments:
        return {}

    latest_by_assignment = [assignment.latest_submissions() for assignment in assignments]
    averages: Dict[str, float] = {}
    for student in students:
        scores = []
        for latest in latest_by_assignment:
            submission = latest.get(student.id)
            scores.append(submission.total_score if submission else 0)
        averages[student.id] = sum(scores) / len(scores)
    return averages


def generate_performance_distribution(
    students: Sequence[Student],
    assignments: Sequence[Assignment],
) -> ScoreDistribution:
    averages = calculate_student_averages(students, assignments)
    return ScoreDistribution.from_buckets(
        ScoreBucket.classify(average) for average in averages.values()
    )


def calculate_weekly_engagement(
    assignments: Sequence[Assignment],
    now: Optional[datetime] = None,
) -> List[int]:
    """
    Submission counts for the last four weeks, oldest week first.

    Each submission goes into week (now - submitted_at) // 7 days, where week
    0 is the most recent. Submissions in the future or older than four weeks
    are dropped. `now` is resolved once and shared by every submission.
    """
    now = _resolve_now(now)
    weekly = [0] * ENGAGEMENT_WEEKS

    for assignment in assignments:
        for submission in assignment.submissions:
            week_index = (now - submission.submitted_at) // WEEK
            if 0 <= week_index < ENGAGEMENT_WEEKS:
                weekly[week_index] += 1

    weekly.reverse()
    return weekly


def build_course_analytics(
    course: Course,
    recent_assignments: Optional[Sequence[Assignment]] = None,
    now: Optional[datetime] = None,
) -> CourseAnalytics:
    """Compose every course metric from an already loaded course snapshot."""
    now = _resolve_now(now)
    if recent_assignments is None:
        recent_assignments = course.assignments

    return CourseAnalytics(
        course_id=course.id,
        total_students=course.total_students,
        average_attendance=calculate_average_attendance(course.attendance),
        assignment_completion=calculate_assignment_completion(course.assignments),
        performance_distribution=generate_performance_distribution(
            course.students, course.assignments
        ),
        weekly_engagement=calculate_weekly_engagement(recent_assignments, now=now),
    )


async def get_course_analytics(
    source: CourseDataSource,
    course_id: str,
    now: Optional[datetime] = None,
) -> CourseAnalytics:
    """Load one course and compute its analytics. Load errors propagate."""
    now = _resolve_now(now)
    course = await source.get_course(course_id)
    recent = await source.get_recent_assignments(course_id, since=now - ENGAGEMENT_WINDOW)

    analytics = build_course_analytics(course, recent, now=now)
    logger.info(
        f"Computed analytics for course {course_id}: "
        f"{analytics.total_students} students, {len(course.assignments)} assignments"
    )
    return analytics


def _recent_submissions(
    course: Course,
    assignments: Sequence[Assignment],
    now: datetime,
) -> List[RecentSubmission]:
    """Submissions from the last four weeks, whatever the source returned."""
    since = now - ENGAGEMENT_WINDOW
    return [
        RecentSubmission(
            course_id=course.id,
            assignment_id=assignment.id,
            assignment_title=assignment.title,
            student_id=submission.student_id,
            submitted_at=submission.submitted_at,
            total_score=submission.total_score,
        )
        for assignment in assignments
        for submission in assignment.submissions
        if since <= submission.submitted_at <= now
    ]


async def get_dashboard_analytics(
    source: CourseDataSource,
    instructor_id: str,
    now: Optional[datetime] = None,
) -> DashboardAnalytics:
    """
    Roll up every course taught by an instructor.

    A course that fails to load is logged, recorded in failed_courses and
    skipped; it contributes nothing to the totals.
    """
    now = _resolve_now(now)
    course_ids = await source.list_instructor_courses(instructor_id)

    dashboard = DashboardAnalytics()
    all_averages: List[float] = []
    submissions: List[RecentSubmission] = []

    for course_id in course_ids:
        try:
            course = await source.get_course(course_id)
            recent = await source.get_recent_assignments(course_id, since=now - ENGAGEMENT_WINDOW)
        except Exception as e:
            logger.error(f"Skipping course {course_id} in dashboard roll-up: {e}")
            dashboard.failed_courses.append(course_id)
            continue

        dashboard.total_students += course.total_students
        all_averages.extend(calculate_student_averages(course.students, course.assignments).values())
        submissions.extend(_recent_submissions(course, recent, now))
        dashboard.course_engagement.append(
            CourseEngagement(
                course_id=course.id,
                title=course.title,
                total_students=course.total_students,
                average_attendance=calculate_average_attendance(course.attendance),
                weekly_engagement=calculate_weekly_engagement(recent, now=now),
            )
        )

    if all_averages:
        dashboard.average_performance = sum(all_averages) / len(all_averages)

    submissions.sort(key=lambda s: s.submitted_at, reverse=True)
    dashboard.recent_submissions = submissions[: settings.RECENT_SUBMISSIONS_LIMIT]

    logger.info(
        f"Dashboard for instructor {instructor_id}: {len(dashboard.course_engagement)} course(s), "
        f"{len(dashboard.failed_courses)} skipped, {dashboard.total_students} students"
    )
    return dashboard
