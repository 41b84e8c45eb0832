"""Course selection endpoints for a student."""

from fastapi import APIRouter, status

from coursereg.api.dependencies import EnrollmentManagerDep
from coursereg.api.models import (
    AddCoursesRequest,
    APIResponse,
    DropCourseResponse,
    RegistrationStatusResponse,
)

router = APIRouter(prefix="/students/{student_id}", tags=["enrollment"])


@router.post("/registration", status_code=status.HTTP_204_NO_CONTENT)
def register_courses(student_id: int, manager: EnrollmentManagerDep) -> None:
    """Initiate administrative registration for a student."""
    manager.register_courses(student_id)


@router.get("/courses", response_model=APIResponse[dict[str, str]])
def get_added_courses(student_id: int, manager: EnrollmentManagerDep) -> APIResponse[dict[str, str]]:
    """All course selections, pending and confirmed."""
    return APIResponse(data=manager.get_added_courses(student_id))


@router.post(
    "/courses",
    response_model=APIResponse[dict[str, str]],
    status_code=status.HTTP_201_CREATED,
)
def add_courses(
    student_id: int, request: AddCoursesRequest, manager: EnrollmentManagerDep
) -> APIResponse[dict[str, str]]:
    """Add ranked course preferences."""
    manager.add_courses(student_id, request.courses)
    return APIResponse(data=manager.get_added_courses(student_id))


@router.get("/courses/registered", response_model=APIResponse[dict[str, str]])
def list_courses(student_id: int, manager: EnrollmentManagerDep) -> APIResponse[dict[str, str]]:
    """Confirmed registrations of an approved student."""
    return APIResponse(data=manager.list_courses(student_id))


@router.delete("/courses/{course_id}", response_model=APIResponse[DropCourseResponse])
def drop_course(
    student_id: int, course_id: str, manager: EnrollmentManagerDep
) -> APIResponse[DropCourseResponse]:
    """Drop a course selection."""
    was_registered = manager.drop_courses(student_id, course_id)
    return APIResponse(data=DropCourseResponse(course_id=course_id, was_registered=was_registered))


@router.get("/status", response_model=APIResponse[RegistrationStatusResponse])
def registration_status(
    student_id: int, manager: EnrollmentManagerDep
) -> APIResponse[RegistrationStatusResponse]:
    """Approval flag and both registration checks."""
    return APIResponse(
        data=RegistrationStatusResponse(
            student_id=student_id,
            approved=manager.is_approved(student_id),
            registered=manager.is_registered(student_id),
            registration_flag=manager.is_student_registered(student_id),
        )
    )
