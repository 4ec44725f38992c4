from app.models.course import (
    AttendanceMark,
    AttendanceSession,
    AttendanceStatus,
    Assignment,
    Course,
    Student,
    Submission,
)
