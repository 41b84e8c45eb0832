"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from coursereg.config import EnrollmentLimits
from coursereg.enrollment import EnrollmentManager
from coursereg.reports import ReportAggregator
from coursereg.store import RegistryStore

# Global instances (initialized on app startup)
_store: RegistryStore | None = None
_enrollment_manager: EnrollmentManager | None = None
_report_aggregator: ReportAggregator | None = None


def init_services(
    db_path: str = "coursereg.db", limits: EnrollmentLimits | None = None
) -> RegistryStore:
    """Initialize the global store and the services built on it."""
    global _store, _enrollment_manager, _report_aggregator  # noqa: PLW0603
    _store = RegistryStore(db_path)
    _enrollment_manager = EnrollmentManager(_store, limits)
    _report_aggregator = ReportAggregator(_store, limits)
    return _store


def close_services() -> None:
    """Close the global store and drop the services."""
    global _store, _enrollment_manager, _report_aggregator  # noqa: PLW0603
    if _store is not None:
        _store.close()
    _store = None
    _enrollment_manager = None
    _report_aggregator = None


def get_enrollment_manager() -> Generator[EnrollmentManager, None, None]:
    """Dependency that provides the EnrollmentManager instance."""
    if _enrollment_manager is None:
        raise RuntimeError("EnrollmentManager not initialized. Call init_services() first.")
    yield _enrollment_manager


# Type alias for dependency injection
EnrollmentManagerDep = Annotated[EnrollmentManager, Depends(get_enrollment_manager)]


def get_report_aggregator() -> Generator[ReportAggregator, None, None]:
    """Dependency that provides the ReportAggregator instance."""
    if _report_aggregator is None:
        raise RuntimeError("ReportAggregator not initialized. Call init_services() first.")
    yield _report_aggregator


# Type alias for dependency injection
ReportAggregatorDep = Annotated[ReportAggregator, Depends(get_report_aggregator)]
