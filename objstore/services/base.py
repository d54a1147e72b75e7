from __future__ import annotations

from objstore.common.config import Settings, get_settings
from objstore.errors import InvalidArgumentError, ObjectStorageError
from objstore.infra.storage.client import StorageClient


class IncompleteUploadError(ObjectStorageError):
    """Raised when a multipart session failed after it was opened.

    The session has already been aborted (best effort); the failure that
    caused it is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
        part_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.object_key = object_key
        self.upload_id = upload_id
        self.part_number = part_number


class BaseService:
    """Holds the transport and settings shared by the storage services."""

    def __init__(
        self,
        storage: StorageClient,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._storage = storage
        self._settings = settings or get_settings()

    @property
    def storage(self) -> StorageClient:
        return self._storage

    @property
    def settings(self) -> Settings:
        return self._settings

    def _ensure_bucket(self, bucket: str) -> str:
        name = (bucket or "").strip()
        if not name:
            raise InvalidArgumentError("bucket name is required")
        return name

    def _ensure_object_key(self, object_key: str) -> str:
        if not object_key:
            raise InvalidArgumentError("object key is required")
        return object_key
