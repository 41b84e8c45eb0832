"""Course registration service - preferences, enrollment and grade reports."""

__version__ = "0.1.0"


def get_version() -> str:
    """Return the installed package version."""
    return __version__
