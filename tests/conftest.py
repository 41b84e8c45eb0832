"""Shared pytest fixtures and configuration."""

from collections.abc import Generator

import pytest

from coursereg.store import RegistryStore, Student


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures

CATALOG = {
    "CS101": "Intro to Programming",
    "CS102": "Data Structures",
    "CS201": "Algorithms",
    "CS202": "Operating Systems",
    "CS301": "Databases",
    "CS302": "Networks",
    "CS401": "Compilers",
    "MA101": "Calculus I",
    "MA102": "Linear Algebra",
}


def seed_catalog(store: RegistryStore) -> None:
    """Load the sample catalog into a store."""
    for course_id, course_name in CATALOG.items():
        store.create_course(course_id, course_name)


@pytest.fixture
def catalog_seeder():
    """Provide the catalog seeding helper to tests that build their own store."""
    return seed_catalog


@pytest.fixture
def store() -> Generator[RegistryStore, None, None]:
    """Create an in-memory RegistryStore with the sample catalog."""
    s = RegistryStore(":memory:")
    seed_catalog(s)
    yield s
    s.close()


@pytest.fixture
def student(store: RegistryStore) -> Student:
    """An approved student with no selections."""
    return store.create_student(name="Ada Lovelace", email="ada@uni.edu", approved=1)


@pytest.fixture
def unapproved_student(store: RegistryStore) -> Student:
    """A student whose account has not been approved."""
    return store.create_student(name="Alan Turing", email="alan@uni.edu", approved=0)
