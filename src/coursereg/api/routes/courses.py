"""Course catalog endpoints."""

from fastapi import APIRouter

from coursereg.api.dependencies import ReportAggregatorDep
from coursereg.api.models import APIResponse, CourseResponse, course_to_response

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def view_course_catalog(aggregator: ReportAggregatorDep) -> APIResponse[list[CourseResponse]]:
    """List the full course catalog."""
    courses = aggregator.view_course_catalog()
    return APIResponse(data=[course_to_response(c) for c in courses])
