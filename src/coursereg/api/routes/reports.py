"""Grade report and student lookup endpoints."""

from fastapi import APIRouter, Query

from coursereg.api.dependencies import ReportAggregatorDep
from coursereg.api.models import (
    APIResponse,
    GradeLineResponse,
    GradeReportResponse,
    StudentLookupResponse,
    report_to_response,
)
from coursereg.reports import STUDENT_NOT_FOUND

router = APIRouter(prefix="/students", tags=["reports"])


@router.get("/lookup", response_model=APIResponse[StudentLookupResponse])
def get_student_by_email(
    aggregator: ReportAggregatorDep,
    email: str = Query(..., min_length=3),
) -> APIResponse[StudentLookupResponse]:
    """Resolve a student ID from an email address."""
    student_id = aggregator.get_student_by_email(email)
    return APIResponse(
        data=StudentLookupResponse(student_id=student_id, found=student_id != STUDENT_NOT_FOUND)
    )


@router.get("/{student_id}/report-card", response_model=APIResponse[GradeReportResponse])
def view_report_card(
    student_id: int, aggregator: ReportAggregatorDep
) -> APIResponse[GradeReportResponse]:
    """Grade report of an approved student."""
    report = aggregator.view_report_card(student_id)
    return APIResponse(data=report_to_response(report))


@router.get(
    "/{student_id}/grades/{course_id}",
    response_model=APIResponse[GradeLineResponse | None],
)
def view_course_grade(
    student_id: int, course_id: str, aggregator: ReportAggregatorDep
) -> APIResponse[GradeLineResponse | None]:
    """Grade of one course; data is null when not graded yet."""
    line = aggregator.view_course_grade(student_id, course_id)
    if line is None:
        return APIResponse(data=None)
    return APIResponse(data=GradeLineResponse.model_validate(line))
