from __future__ import annotations


class ObjectStorageError(Exception):
    """Base error for objstore."""


class ChunkReadError(ObjectStorageError):
    """Raised when the upload source could not be read."""


class InvalidArgumentError(ObjectStorageError, ValueError):
    """Raised when a caller passes a value the service would reject."""
