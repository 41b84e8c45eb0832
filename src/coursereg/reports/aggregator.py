"""ReportAggregator - read-only views over the catalog and grade records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coursereg.config import EnrollmentLimits
from coursereg.enrollment.exceptions import UserNotApprovedError
from coursereg.logging import sanitize_for_log
from coursereg.reports.models import GradeReport

if TYPE_CHECKING:
    from coursereg.store import Course, GradeLine, RegistryStore, StoreSession

logger = logging.getLogger(__name__)

# Student IDs start at 1, so 0 never names a real student
STUDENT_NOT_FOUND = 0


class ReportAggregator:
    """Builds grade reports for approved students."""

    def __init__(self, store: RegistryStore, limits: EnrollmentLimits | None = None) -> None:
        """Initialize the ReportAggregator.

        Args:
            store: RegistryStore to read from.
            limits: Supplies the minimum approval flag.
        """
        self.store = store
        self.limits = limits if limits is not None else EnrollmentLimits()

    def _require_approval(self, tx: StoreSession, student_id: int) -> None:
        if tx.get_approval_flag(student_id) < self.limits.min_approval:
            logger.warning("Student %s is not approved to view grades", student_id)
            raise UserNotApprovedError(student_id)

    def view_course_catalog(self) -> list[Course]:
        """Every course in the catalog."""
        with self.store.transaction() as tx:
            return tx.list_courses()

    def view_report_card(self, student_id: int) -> GradeReport:
        """Assemble the grade report of a student.

        A student without graded courses gets an empty report.

        Args:
            student_id: The student's ID.

        Returns:
            GradeReport with one line per grade record.

        Raises:
            UserNotApprovedError: If the student's approval flag is below the minimum.
        """
        with self.store.transaction() as tx:
            self._require_approval(tx, student_id)
            records = tx.list_grade_records(student_id)

        report = GradeReport(student_id=student_id)
        for record in records:
            report.add_grade_details(record.course_id, record.course_name, record.grade)

        logger.info("Built report card for student %s (%d grades)", student_id, len(report.grades))
        return report

    def view_course_grade(self, student_id: int, course_id: str) -> GradeLine | None:
        """Grade of a single course, or None if it has not been graded.

        Raises:
            UserNotApprovedError: If the student's approval flag is below the minimum.
        """
        with self.store.transaction() as tx:
            self._require_approval(tx, student_id)
            return tx.find_grade_record(student_id, course_id)

    def get_student_by_email(self, email: str) -> int:
        """Resolve a student ID from an email address.

        Returns:
            The student's ID, or ``STUDENT_NOT_FOUND`` (0).
        """
        with self.store.transaction() as tx:
            student_id = tx.resolve_student_id_by_email(email)
        if student_id is None:
            logger.info("No student for email %s", sanitize_for_log(email))
            return STUDENT_NOT_FOUND
        return student_id
