"""Custom exceptions for the registry store."""


class StoreError(Exception):
    """Base exception for registry store errors."""


class StorageFailureError(StoreError):
    """The database could not complete a read or write."""
