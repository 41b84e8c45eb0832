"""REST API for the course registration service."""

from coursereg.api.app import create_app
from coursereg.api.models import (
    AddCoursesRequest,
    APIResponse,
    CourseResponse,
    GradeReportResponse,
)

__all__ = [
    "APIResponse",
    "AddCoursesRequest",
    "CourseResponse",
    "GradeReportResponse",
    "create_app",
]
