"""Registry store - persistent storage for students, courses, preferences and grades."""

from coursereg.store.exceptions import StorageFailureError, StoreError
from coursereg.store.models import (
    Course,
    CourseListing,
    GradeLine,
    GradeRecord,
    PreferenceEntry,
    Student,
)
from coursereg.store.store import RegistryStore, StoreSession

__all__ = [
    "Course",
    "CourseListing",
    "GradeLine",
    "GradeRecord",
    "PreferenceEntry",
    "RegistryStore",
    "StorageFailureError",
    "StoreError",
    "StoreSession",
    "Student",
]
