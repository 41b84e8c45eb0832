"""Pydantic models for REST API."""

from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Catalog models


class CourseResponse(BaseModel):
    """Response model for a catalog course."""

    model_config = ConfigDict(from_attributes=True)

    course_id: str
    course_name: str


def course_to_response(course: Any) -> CourseResponse:
    """Convert a Course model to CourseResponse."""
    return CourseResponse.model_validate(course)


# Enrollment models


class AddCoursesRequest(BaseModel):
    """Request model for adding course preferences."""

    courses: dict[str, Annotated[int, Field(ge=1, le=99)]] = Field(..., min_length=1)


class DropCourseResponse(BaseModel):
    """Response model for a dropped course."""

    course_id: str
    was_registered: int


class RegistrationStatusResponse(BaseModel):
    """Response model for a student's approval and registration flags."""

    student_id: int
    approved: int
    registered: bool
    registration_flag: int


# Report models


class GradeLineResponse(BaseModel):
    """Response model for one graded course."""

    model_config = ConfigDict(from_attributes=True)

    course_id: str
    course_name: str
    grade: str


class GradeReportResponse(BaseModel):
    """Response model for a student's grade report."""

    model_config = ConfigDict(from_attributes=True)

    student_id: int
    grades: list[GradeLineResponse]


def report_to_response(report: Any) -> GradeReportResponse:
    """Convert a GradeReport to GradeReportResponse."""
    return GradeReportResponse.model_validate(report)


class StudentLookupResponse(BaseModel):
    """Response model for an email lookup; student_id is 0 when nobody matches."""

    student_id: int
    found: bool
