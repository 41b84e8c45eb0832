"""Data models for grade reports."""

from __future__ import annotations

from dataclasses import dataclass, field

from coursereg.store import GradeLine


@dataclass
class GradeReport:
    """Grade report of one student.

    Attributes:
        student_id: The student the report belongs to.
        grades: Graded courses in the order the store returned them.
    """

    student_id: int
    grades: list[GradeLine] = field(default_factory=list)

    def add_grade_details(self, course_id: str, course_name: str, grade: str) -> None:
        self.grades.append(GradeLine(course_id=course_id, course_name=course_name, grade=grade))
