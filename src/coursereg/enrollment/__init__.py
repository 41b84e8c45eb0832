"""Enrollment package - course selection workflow."""

from coursereg.enrollment.exceptions import (
    CourseLimitExceededError,
    CourseNotFoundError,
    DuplicateCourseEntryError,
    RegistrationError,
    StudentNotFoundError,
    UserNotApprovedError,
)
from coursereg.enrollment.manager import EnrollmentManager

__all__ = [
    "CourseLimitExceededError",
    "CourseNotFoundError",
    "DuplicateCourseEntryError",
    "EnrollmentManager",
    "RegistrationError",
    "StudentNotFoundError",
    "UserNotApprovedError",
]
