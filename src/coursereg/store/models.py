"""SQLAlchemy models for the registry store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Student(Base):
    """Student model.

    ``approved`` and ``registered`` are owned by external services
    (identity/approval and the administrative registration process).
    """

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    approved: Mapped[int] = mapped_column(Integer, nullable=False)
    registered: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    # Relationships
    preferences: Mapped[list[PreferenceEntry]] = relationship(
        "PreferenceEntry", back_populates="student", cascade="all, delete-orphan"
    )
    grades: Mapped[list[GradeRecord]] = relationship(
        "GradeRecord", back_populates="student", cascade="all, delete-orphan"
    )

    def __init__(
        self,
        name: str,
        email: str,
        approved: int = 0,
        registered: int = 0,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.name = name
        self.email = email
        self.approved = approved
        self.registered = registered

    def __repr__(self) -> str:
        return f"<Student(id={self.id!r}, email={self.email!r}, approved={self.approved!r})>"


class Course(Base):
    """Catalog course. Read-only from the enrollment workflow."""

    __tablename__ = "courses"

    course_id: Mapped[str] = mapped_column(String(20), primary_key=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __init__(self, course_id: str, course_name: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.course_id = course_id
        self.course_name = course_name

    def __repr__(self) -> str:
        return f"<Course(course_id={self.course_id!r}, course_name={self.course_name!r})>"


class PreferenceEntry(Base):
    """A student's ranked selection of a course.

    ``is_registered`` is False while the selection is a pending preference
    and True once the administrative process has confirmed it.
    """

    __tablename__ = "preference_entries"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_preference_student_course"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("students.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("courses.course_id"), nullable=False
    )
    preference: Mapped[int] = mapped_column(Integer, nullable=False)
    is_registered: Mapped[bool] = mapped_column(Boolean, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    # Relationships
    student: Mapped[Student] = relationship("Student", back_populates="preferences")
    course: Mapped[Course] = relationship("Course")

    def __init__(
        self,
        student_id: int,
        course_id: str,
        preference: int,
        is_registered: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.preference = preference
        self.is_registered = is_registered

    def __repr__(self) -> str:
        return (
            f"<PreferenceEntry(student_id={self.student_id!r}, course_id={self.course_id!r}, "
            f"is_registered={self.is_registered!r})>"
        )


class GradeRecord(Base):
    """Grade assigned to a student for a course. Written by the grading process only."""

    __tablename__ = "grade_records"
    __table_args__ = (UniqueConstraint("student_id", "course_id", name="uq_grade_student_course"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, ForeignKey("students.id"), nullable=False)
    course_id: Mapped[str] = mapped_column(
        String(20), ForeignKey("courses.course_id"), nullable=False
    )
    grade: Mapped[str] = mapped_column(String(5), nullable=False)

    # Relationships
    student: Mapped[Student] = relationship("Student", back_populates="grades")
    course: Mapped[Course] = relationship("Course")

    def __init__(self, student_id: int, course_id: str, grade: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.student_id = student_id
        self.course_id = course_id
        self.grade = grade

    def __repr__(self) -> str:
        return (
            f"<GradeRecord(student_id={self.student_id!r}, course_id={self.course_id!r}, "
            f"grade={self.grade!r})>"
        )


@dataclass(frozen=True)
class CourseListing:
    """Course id and name for one of a student's selections."""

    course_id: str
    course_name: str


@dataclass(frozen=True)
class GradeLine:
    """One graded course on a student's report."""

    course_id: str
    course_name: str
    grade: str
