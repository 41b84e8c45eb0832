"""RegistryStore - Main API for registry store operations."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from coursereg.store.database import Database
from coursereg.store.exceptions import StorageFailureError, StoreError
from coursereg.store.models import (
    Course,
    CourseListing,
    GradeLine,
    GradeRecord,
    PreferenceEntry,
    Student,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class StoreSession:
    """Queries and writes bound to a single unit of work.

    Obtained from ``RegistryStore.transaction()``; everything done through one
    StoreSession commits or rolls back together.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    # --- Students ---

    def find_student_by_id(self, student_id: int) -> Student | None:
        return self.session.get(Student, student_id)

    def get_approval_flag(self, student_id: int) -> int:
        """Approval flag of the student, 0 for an unknown id."""
        stmt = select(Student.approved).where(Student.id == student_id)
        return self.session.execute(stmt).scalar_one_or_none() or 0

    def get_registered_flag(self, student_id: int) -> int:
        """External registration flag of the student, 0 for an unknown id."""
        stmt = select(Student.registered).where(Student.id == student_id)
        return self.session.execute(stmt).scalar_one_or_none() or 0

    def mark_registration_initiated(self, student_id: int) -> None:
        student = self.session.get(Student, student_id)
        if student is not None:
            student.registered = 1
            self.session.flush()

    def resolve_student_id_by_email(self, email: str) -> int | None:
        stmt = select(Student.id).where(Student.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    # --- Catalog ---

    def find_course_by_id(self, course_id: str) -> Course | None:
        return self.session.get(Course, course_id)

    def list_courses(self) -> list[Course]:
        result = self.session.execute(select(Course))
        return list(result.scalars().all())

    # --- Preference entries ---

    def count_preference_entries(self, student_id: int) -> int:
        stmt = select(func.count(PreferenceEntry.id)).where(
            PreferenceEntry.student_id == student_id
        )
        return self.session.execute(stmt).scalar_one()

    def count_confirmed_preference_entries(self, student_id: int) -> int:
        stmt = select(func.count(PreferenceEntry.id)).where(
            PreferenceEntry.student_id == student_id,
            PreferenceEntry.is_registered.is_(True),
        )
        return self.session.execute(stmt).scalar_one()

    def find_preference_entry(self, student_id: int, course_id: str) -> PreferenceEntry | None:
        stmt = select(PreferenceEntry).where(
            PreferenceEntry.student_id == student_id,
            PreferenceEntry.course_id == course_id,
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def create_preference_entry(
        self, student_id: int, course_id: str, preference: int
    ) -> PreferenceEntry:
        entry = PreferenceEntry(
            student_id=student_id,
            course_id=course_id,
            preference=preference,
            is_registered=False,
        )
        self.session.add(entry)
        self.session.flush()
        return entry

    def delete_preference_entry(self, student_id: int, course_id: str) -> None:
        stmt = delete(PreferenceEntry).where(
            PreferenceEntry.student_id == student_id,
            PreferenceEntry.course_id == course_id,
        )
        self.session.execute(stmt)

    def list_confirmed_preference_entries(self, student_id: int) -> list[CourseListing]:
        return self._list_preference_courses(student_id, confirmed_only=True)

    def list_all_preference_entries(self, student_id: int) -> list[CourseListing]:
        return self._list_preference_courses(student_id, confirmed_only=False)

    def _list_preference_courses(
        self, student_id: int, confirmed_only: bool
    ) -> list[CourseListing]:
        stmt = (
            select(Course.course_id, Course.course_name)
            .join(PreferenceEntry, PreferenceEntry.course_id == Course.course_id)
            .where(PreferenceEntry.student_id == student_id)
        )
        if confirmed_only:
            stmt = stmt.where(PreferenceEntry.is_registered.is_(True))
        rows = self.session.execute(stmt).all()
        return [CourseListing(course_id=row.course_id, course_name=row.course_name) for row in rows]

    # --- Grades ---

    def list_grade_records(self, student_id: int) -> list[GradeLine]:
        """Graded courses of a student, in insertion order."""
        stmt = (
            select(Course.course_id, Course.course_name, GradeRecord.grade)
            .join(GradeRecord, GradeRecord.course_id == Course.course_id)
            .where(GradeRecord.student_id == student_id)
            .order_by(GradeRecord.id)
        )
        rows = self.session.execute(stmt).all()
        return [
            GradeLine(course_id=row.course_id, course_name=row.course_name, grade=row.grade)
            for row in rows
        ]

    def find_grade_record(self, student_id: int, course_id: str) -> GradeLine | None:
        stmt = (
            select(Course.course_id, Course.course_name, GradeRecord.grade)
            .join(GradeRecord, GradeRecord.course_id == Course.course_id)
            .where(GradeRecord.student_id == student_id, GradeRecord.course_id == course_id)
        )
        row = self.session.execute(stmt).one_or_none()
        if row is None:
            return None
        return GradeLine(course_id=row.course_id, course_name=row.course_name, grade=row.grade)


class RegistryStore:
    """Main API for registry store operations.

    Hands out units of work for the enrollment workflow and carries the
    administrative writes (students, catalog, confirmation, grading,
    approval) that happen outside it.
    """

    def __init__(self, db_path: str = "coursereg.db") -> None:
        """Initialize the store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[StoreSession]:
        """Open a unit of work.

        Commits when the block exits normally and rolls back otherwise.

        Args:
            write: Pass True when the block modifies data. Write transactions
                take the database write lock up front; read transactions
                run alongside an active writer.

        Yields:
            A StoreSession bound to the transaction.

        Raises:
            StorageFailureError: If the database fails at any point, including commit.
        """
        session = self._db.get_session()
        try:
            if write:
                self._db.begin_write(session)
            yield StoreSession(session)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Registry store transaction failed: %s", e)
            raise StorageFailureError(f"Registry store operation failed: {e}") from e
        except BaseException:
            session.rollback()
            raise
        finally:
            session.close()

    # --- Administrative writes ---

    def create_student(
        self, name: str, email: str, approved: int = 0, registered: int = 0
    ) -> Student:
        """Create a student account record.

        Args:
            name: Display name
            email: Unique email address
            approved: Initial approval flag
            registered: Initial registration flag

        Returns:
            Created Student with generated ID

        Raises:
            StorageFailureError: If the email is already taken
        """
        with self.transaction(write=True) as tx:
            student = Student(name=name, email=email, approved=approved, registered=registered)
            tx.session.add(student)
            tx.session.flush()
            return student

    def create_course(self, course_id: str, course_name: str) -> Course:
        """Add a course to the catalog."""
        with self.transaction(write=True) as tx:
            course = Course(course_id=course_id, course_name=course_name)
            tx.session.add(course)
            tx.session.flush()
            return course

    def set_approval(self, student_id: int, approved: int) -> None:
        """Set the approval flag of a student.

        Raises:
            StoreError: If the student doesn't exist
        """
        with self.transaction(write=True) as tx:
            student = tx.find_student_by_id(student_id)
            if student is None:
                raise StoreError(f"Student with id '{student_id}' not found")
            student.approved = approved

    def confirm_preference(self, student_id: int, course_id: str, confirmed: bool = True) -> None:
        """Set the registered marker of a preference entry.

        Raises:
            StoreError: If the student has no entry for the course
        """
        with self.transaction(write=True) as tx:
            entry = tx.find_preference_entry(student_id, course_id)
            if entry is None:
                raise StoreError(
                    f"No preference for course '{course_id}' by student '{student_id}'"
                )
            entry.is_registered = confirmed

    def record_grade(self, student_id: int, course_id: str, grade: str) -> GradeRecord:
        """Record the grade a student received for a course."""
        with self.transaction(write=True) as tx:
            record = GradeRecord(student_id=student_id, course_id=course_id, grade=grade)
            tx.session.add(record)
            tx.session.flush()
            return record
