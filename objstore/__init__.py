"""Object storage client with multipart uploads and streamed listings."""

__version__ = "0.1.0"

from objstore.api import API, BucketAPI, ObjectAPI, ObjectStorage, new  # noqa: E402
from objstore.domain.streaming import ItemStream, StreamedItem  # noqa: E402
from objstore.errors import (  # noqa: E402
    ChunkReadError,
    InvalidArgumentError,
    ObjectStorageError,
)
from objstore.infra.storage.client import (  # noqa: E402
    BucketMetadata,
    ObjectMetadata,
    StorageError,
)
from objstore.services.base import IncompleteUploadError  # noqa: E402

__all__ = [
    "API",
    "BucketAPI",
    "BucketMetadata",
    "ChunkReadError",
    "IncompleteUploadError",
    "InvalidArgumentError",
    "ItemStream",
    "ObjectAPI",
    "ObjectMetadata",
    "ObjectStorage",
    "ObjectStorageError",
    "StorageError",
    "StreamedItem",
    "new",
]
