"""Exceptions for the enrollment workflow."""

from __future__ import annotations

from collections.abc import Iterable


class RegistrationError(Exception):
    """Base exception for enrollment and report errors."""


class StudentNotFoundError(RegistrationError):
    """Student with given ID does not exist."""

    def __init__(self, student_id: int) -> None:
        super().__init__(f"Student with id '{student_id}' not found")
        self.student_id = student_id


class CourseNotFoundError(RegistrationError):
    """One or more course IDs are not in the catalog."""

    def __init__(self, course_ids: str | Iterable[str]) -> None:
        ids = [course_ids] if isinstance(course_ids, str) else list(course_ids)
        super().__init__(f"Course not found in catalog: {', '.join(ids)}")
        self.course_ids = ids
        self.course_id = ids[0]


class CourseLimitExceededError(RegistrationError):
    """Student already holds more course selections than allowed."""

    def __init__(self, student_id: int, count: int, limit: int) -> None:
        super().__init__(
            f"Student '{student_id}' already has {count} course selections (limit {limit})"
        )
        self.student_id = student_id
        self.count = count
        self.limit = limit


class DuplicateCourseEntryError(RegistrationError):
    """Student already has a selection for the course."""

    def __init__(self, student_id: int, course_ids: Iterable[str]) -> None:
        ids = list(course_ids)
        super().__init__(f"Student '{student_id}' already added: {', '.join(ids)}")
        self.student_id = student_id
        self.course_ids = ids


class UserNotApprovedError(RegistrationError):
    """Student is not approved to view courses or grades."""

    def __init__(self, student_id: int) -> None:
        super().__init__(f"Student '{student_id}' is not approved")
        self.student_id = student_id
