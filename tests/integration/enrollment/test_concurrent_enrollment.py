"""Integration tests for concurrent enrollment against a file-backed store."""

import threading
from pathlib import Path

import pytest

from coursereg.enrollment import CourseLimitExceededError, DuplicateCourseEntryError, EnrollmentManager
from coursereg.store import RegistryStore


@pytest.fixture
def file_store(tmp_path: Path, catalog_seeder):
    """Create a RegistryStore backed by a temporary SQLite file."""
    store = RegistryStore(str(tmp_path / "registry.db"))
    catalog_seeder(store)
    yield store
    store.close()


def _run_concurrently(targets: list) -> list[BaseException]:
    errors: list[BaseException] = []
    barrier = threading.Barrier(len(targets))

    def wrap(target):
        def run():
            barrier.wait()
            try:
                target()
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        return run

    threads = [threading.Thread(target=wrap(t)) for t in targets]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return errors


@pytest.mark.integration
class TestConcurrentAdds:
    """Concurrent adds for one student keep the checks consistent."""

    def test_same_course_added_once(self, file_store: RegistryStore) -> None:
        """Racing adds of one course leave a single entry."""
        student = file_store.create_student(name="Ada", email="ada@uni.edu", approved=1)
        manager = EnrollmentManager(file_store)

        errors = _run_concurrently(
            [lambda: manager.add_courses(student.id, {"CS101": 1}) for _ in range(4)]
        )

        assert len(errors) == 3
        assert all(isinstance(e, DuplicateCourseEntryError) for e in errors)
        assert manager.get_added_courses(student.id) == {"CS101": "Intro to Programming"}

    def test_limit_check_not_bypassed(self, file_store: RegistryStore) -> None:
        """Once one batch reaches seven, racing batches see it and fail."""
        student = file_store.create_student(name="Ada", email="ada@uni.edu", approved=1)
        manager = EnrollmentManager(file_store)
        manager.add_courses(
            student.id,
            {"CS101": 1, "CS102": 2, "CS201": 3, "CS202": 4, "CS301": 5, "CS302": 6},
        )

        errors = _run_concurrently(
            [
                lambda: manager.add_courses(student.id, {"CS401": 7}),
                lambda: manager.add_courses(student.id, {"MA101": 7}),
                lambda: manager.add_courses(student.id, {"MA102": 7}),
            ]
        )

        assert len(errors) == 2
        assert all(isinstance(e, CourseLimitExceededError) for e in errors)
        with file_store.transaction() as tx:
            assert tx.count_preference_entries(student.id) == 7

    def test_two_managers_share_the_database_lock(self, file_store: RegistryStore) -> None:
        """Separate managers (separate lock tables) are still serialized by the database."""
        student = file_store.create_student(name="Ada", email="ada@uni.edu", approved=1)
        managers = [EnrollmentManager(file_store) for _ in range(3)]

        errors = _run_concurrently(
            [lambda m=m: m.add_courses(student.id, {"MA101": 1}) for m in managers]
        )

        assert len(errors) == 2
        assert all(isinstance(e, DuplicateCourseEntryError) for e in errors)

    def test_drop_and_add_different_students(self, file_store: RegistryStore) -> None:
        """Work for different students proceeds independently."""
        first = file_store.create_student(name="Ada", email="ada@uni.edu", approved=1)
        second = file_store.create_student(name="Alan", email="alan@uni.edu", approved=1)
        manager = EnrollmentManager(file_store)
        manager.add_courses(first.id, {"CS101": 1})

        errors = _run_concurrently(
            [
                lambda: manager.drop_courses(first.id, "CS101"),
                lambda: manager.add_courses(second.id, {"CS101": 1, "CS102": 2}),
            ]
        )

        assert errors == []
        assert manager.get_added_courses(first.id) == {}
        assert set(manager.get_added_courses(second.id)) == {"CS101", "CS102"}
