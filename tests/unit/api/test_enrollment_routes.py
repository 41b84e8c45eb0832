"""Unit tests for enrollment and catalog routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursereg.api.app import ERROR_RESPONSES, add_exception_handlers
from coursereg.api.dependencies import get_enrollment_manager, get_report_aggregator
from coursereg.api.routes import courses, enrollment
from coursereg.enrollment import EnrollmentManager
from coursereg.reports import ReportAggregator
from coursereg.store import RegistryStore, Student


@pytest.fixture
def app(store: RegistryStore):
    """Create a test FastAPI app wired to the in-memory store."""
    app = FastAPI()
    manager = EnrollmentManager(store)
    aggregator = ReportAggregator(store)

    def override_get_enrollment_manager():
        yield manager

    def override_get_report_aggregator():
        yield aggregator

    app.dependency_overrides[get_enrollment_manager] = override_get_enrollment_manager
    app.dependency_overrides[get_report_aggregator] = override_get_report_aggregator

    add_exception_handlers(app)

    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(enrollment.router, prefix="/api/v1")

    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.mark.unit
class TestCatalogRoute:
    """Tests for GET /courses."""

    def test_lists_catalog(self, client: TestClient) -> None:
        response = client.get("/api/v1/courses")

        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        assert len(data["data"]) == 9
        assert {"course_id": "CS101", "course_name": "Intro to Programming"} in data["data"]


@pytest.mark.unit
class TestAddCoursesRoute:
    """Tests for POST /students/{id}/courses."""

    def test_add_courses(self, client: TestClient, student: Student) -> None:
        response = client.post(
            f"/api/v1/students/{student.id}/courses",
            json={"courses": {"CS101": 1, "CS102": 2}},
        )

        assert response.status_code == 201
        assert response.json()["data"] == {
            "CS101": "Intro to Programming",
            "CS102": "Data Structures",
        }

    def test_unknown_student_404(self, client: TestClient) -> None:
        response = client.post("/api/v1/students/999/courses", json={"courses": {"CS101": 1}})

        assert response.status_code == 404
        assert response.json() == {"data": None, "error": "Student not found"}

    def test_unknown_course_412(self, client: TestClient, student: Student) -> None:
        response = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"XX999": 1}}
        )

        assert response.status_code == 412
        assert response.json()["error"] == "Course not found"

    def test_duplicate_course_400(self, client: TestClient, student: Student) -> None:
        client.post(f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 1}})

        response = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 1}}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Course already added"

    def test_limit_exceeded_409(self, client: TestClient, student: Student) -> None:
        seven = ["CS101", "CS102", "CS201", "CS202", "CS301", "CS302", "CS401"]
        client.post(
            f"/api/v1/students/{student.id}/courses",
            json={"courses": {cid: i + 1 for i, cid in enumerate(seven)}},
        )

        response = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"MA101": 1}}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Course limit exceeded"

    def test_invalid_rank_rejected(self, client: TestClient, student: Student) -> None:
        response = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 0}}
        )

        assert response.status_code == 422

    def test_empty_selection_rejected(self, client: TestClient, student: Student) -> None:
        response = client.post(f"/api/v1/students/{student.id}/courses", json={"courses": {}})

        assert response.status_code == 422

    def test_validation_and_catalog_errors_differ(
        self, client: TestClient, student: Student
    ) -> None:
        """A malformed body and an unknown course are told apart by status."""
        malformed = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 0}}
        )
        unknown = client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"XX999": 1}}
        )

        assert malformed.status_code == 422
        assert unknown.status_code == 412


@pytest.mark.unit
class TestDropCourseRoute:
    """Tests for DELETE /students/{id}/courses/{course_id}."""

    def test_drop_confirmed(
        self, client: TestClient, store: RegistryStore, student: Student
    ) -> None:
        client.post(f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 1}})
        store.confirm_preference(student.id, "CS101")

        response = client.delete(f"/api/v1/students/{student.id}/courses/CS101")

        assert response.status_code == 200
        assert response.json()["data"] == {"course_id": "CS101", "was_registered": 1}

    def test_drop_unknown_course_412(self, client: TestClient, student: Student) -> None:
        response = client.delete(f"/api/v1/students/{student.id}/courses/XX999")

        assert response.status_code == 412
        assert response.json()["error"] == "Course not found"


@pytest.mark.unit
class TestListingRoutes:
    """Tests for the course listing and status routes."""

    def test_registered_courses_requires_approval(
        self, client: TestClient, unapproved_student: Student
    ) -> None:
        response = client.get(f"/api/v1/students/{unapproved_student.id}/courses/registered")

        assert response.status_code == 403
        assert response.json() == {"data": None, "error": "Student not approved"}

    def test_added_vs_registered(
        self, client: TestClient, store: RegistryStore, student: Student
    ) -> None:
        client.post(
            f"/api/v1/students/{student.id}/courses", json={"courses": {"CS101": 1, "CS102": 2}}
        )
        store.confirm_preference(student.id, "CS102")

        added = client.get(f"/api/v1/students/{student.id}/courses").json()["data"]
        registered = client.get(f"/api/v1/students/{student.id}/courses/registered").json()["data"]

        assert set(added) == {"CS101", "CS102"}
        assert registered == {"CS102": "Data Structures"}

    def test_status(self, client: TestClient, student: Student) -> None:
        client.post(f"/api/v1/students/{student.id}/registration")

        response = client.get(f"/api/v1/students/{student.id}/status")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "student_id": student.id,
            "approved": 1,
            "registered": False,
            "registration_flag": 1,
        }

    def test_register_unknown_student_404(self, client: TestClient) -> None:
        response = client.post("/api/v1/students/999/registration")

        assert response.status_code == 404


@pytest.mark.unit
def test_error_statuses_are_distinct() -> None:
    """Each error kind has its own status, none shared with request validation."""
    statuses = [status_code for status_code, _message in ERROR_RESPONSES.values()]

    assert len(set(statuses)) == len(statuses)
    assert 422 not in statuses
