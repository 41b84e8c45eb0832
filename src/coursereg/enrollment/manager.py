"""EnrollmentManager - course selection lifecycle for students."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING

from coursereg.config import EnrollmentLimits
from coursereg.enrollment.exceptions import (
    CourseLimitExceededError,
    CourseNotFoundError,
    DuplicateCourseEntryError,
    StudentNotFoundError,
    UserNotApprovedError,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from coursereg.store import CourseListing, RegistryStore, StoreSession

logger = logging.getLogger(__name__)


class EnrollmentManager:
    """Mediates every change to a student's course selections.

    A selection starts as a pending preference (``is_registered`` False) when
    added, is confirmed by the administrative process outside this class, and
    disappears when dropped. Mutations for the same student are serialized
    and each runs in a single store transaction.
    """

    def __init__(self, store: RegistryStore, limits: EnrollmentLimits | None = None) -> None:
        """Initialize the EnrollmentManager.

        Args:
            store: RegistryStore used for every read and write.
            limits: Selection ceiling, registration threshold and approval minimum.
        """
        self.store = store
        self.limits = limits if limits is not None else EnrollmentLimits()
        # student id -> (lock, number of callers holding or waiting on it)
        self._locks: dict[int, tuple[threading.Lock, int]] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _student_lock(self, student_id: int) -> Iterator[None]:
        """Serialize work for one student.

        The entry is dropped when its last user leaves, so the table only
        holds students with work in flight.
        """
        with self._locks_guard:
            lock, users = self._locks.get(student_id, (threading.Lock(), 0))
            self._locks[student_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                _, users = self._locks[student_id]
                if users == 1:
                    del self._locks[student_id]
                else:
                    self._locks[student_id] = (lock, users - 1)

    def _require_student(self, tx: StoreSession, student_id: int) -> None:
        if tx.find_student_by_id(student_id) is None:
            logger.warning("Unknown student %s", student_id)
            raise StudentNotFoundError(student_id)

    def _require_approval(self, tx: StoreSession, student_id: int) -> None:
        if tx.get_approval_flag(student_id) < self.limits.min_approval:
            logger.warning("Student %s is not approved", student_id)
            raise UserNotApprovedError(student_id)

    def register_courses(self, student_id: int) -> None:
        """Mark administrative registration as initiated for a student.

        Raises:
            StudentNotFoundError: If the student doesn't exist.
        """
        with self.store.transaction(write=True) as tx:
            self._require_student(tx, student_id)
            tx.mark_registration_initiated(student_id)
        logger.info("Registration initiated for student %s", student_id)

    def add_courses(self, student_id: int, selections: Mapping[str, int]) -> None:
        """Add ranked course preferences for a student.

        Checks run in order and the first failure wins: student exists,
        current selection count is not above the ceiling, every course is in
        the catalog, none is already selected. Nothing is written unless all
        checks pass.

        Args:
            student_id: The student's ID.
            selections: Mapping of course ID to preference rank (positive int).

        Raises:
            ValueError: If a preference rank is not a positive integer.
            StudentNotFoundError: If the student doesn't exist.
            CourseLimitExceededError: If the student already holds more than
                ``max_preferences`` selections.
            CourseNotFoundError: If any course ID is not in the catalog.
            DuplicateCourseEntryError: If any course is already selected.
        """
        for course_id, rank in selections.items():
            if not isinstance(rank, int) or isinstance(rank, bool) or rank < 1:
                raise ValueError(f"Preference for '{course_id}' must be a positive integer")

        with self._student_lock(student_id), self.store.transaction(write=True) as tx:
            self._require_student(tx, student_id)

            # Strict '>' against the existing count: one call may overshoot the ceiling
            count = tx.count_preference_entries(student_id)
            if count > self.limits.max_preferences:
                logger.warning(
                    "Student %s at %d selections, limit %d",
                    student_id,
                    count,
                    self.limits.max_preferences,
                )
                raise CourseLimitExceededError(student_id, count, self.limits.max_preferences)

            missing = [cid for cid in selections if tx.find_course_by_id(cid) is None]
            if missing:
                logger.warning("Student %s selected unknown courses %s", student_id, missing)
                raise CourseNotFoundError(missing)

            duplicates = [
                cid for cid in selections if tx.find_preference_entry(student_id, cid) is not None
            ]
            if duplicates:
                logger.warning("Student %s already selected %s", student_id, duplicates)
                raise DuplicateCourseEntryError(student_id, duplicates)

            for course_id, rank in selections.items():
                tx.create_preference_entry(student_id, course_id, rank)

        logger.info("Added %d course(s) for student %s", len(selections), student_id)

    def drop_courses(self, student_id: int, course_id: str) -> int:
        """Remove a student's selection of a course.

        Args:
            student_id: The student's ID.
            course_id: The catalog course ID.

        Returns:
            The registered flag the selection had just before deletion:
            1 for a confirmed registration, 0 for a pending preference or
            when the student had not selected the course.

        Raises:
            StudentNotFoundError: If the student doesn't exist.
            CourseNotFoundError: If the course is not in the catalog.
        """
        with self._student_lock(student_id), self.store.transaction(write=True) as tx:
            self._require_student(tx, student_id)
            if tx.find_course_by_id(course_id) is None:
                logger.warning("Student %s tried to drop unknown course %s", student_id, course_id)
                raise CourseNotFoundError(course_id)

            entry = tx.find_preference_entry(student_id, course_id)
            was_registered = int(entry.is_registered) if entry is not None else 0
            tx.delete_preference_entry(student_id, course_id)

        logger.info(
            "Dropped course %s for student %s (registered=%d)",
            course_id,
            student_id,
            was_registered,
        )
        return was_registered

    def list_courses(self, student_id: int) -> dict[str, str]:
        """Confirmed registrations of an approved student.

        Returns:
            Mapping of course ID to course name.

        Raises:
            UserNotApprovedError: If the student's approval flag is below the minimum.
        """
        with self.store.transaction() as tx:
            self._require_approval(tx, student_id)
            return _as_mapping(tx.list_confirmed_preference_entries(student_id))

    def get_added_courses(self, student_id: int) -> dict[str, str]:
        """All selections of a student, pending and confirmed."""
        with self.store.transaction() as tx:
            return _as_mapping(tx.list_all_preference_entries(student_id))

    def is_approved(self, student_id: int) -> int:
        """Raw approval flag; 0 for an unknown student."""
        with self.store.transaction() as tx:
            return tx.get_approval_flag(student_id)

    def is_registered(self, student_id: int) -> bool:
        """Whether the student has at least ``registration_threshold`` confirmed courses.

        Raises:
            StudentNotFoundError: If the student doesn't exist.
        """
        with self.store.transaction() as tx:
            self._require_student(tx, student_id)
            confirmed = tx.count_confirmed_preference_entries(student_id)
        return confirmed >= self.limits.registration_threshold

    def is_student_registered(self, student_id: int) -> int:
        """External registration flag, independent of ``is_registered``; 0 if unknown."""
        with self.store.transaction() as tx:
            return tx.get_registered_flag(student_id)


def _as_mapping(listings: list[CourseListing]) -> dict[str, str]:
    return {listing.course_id: listing.course_name for listing in listings}
