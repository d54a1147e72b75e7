"""Object storage transport layer.

This module provides a protocol-based abstraction for the storage transport,
with an implementation for S3, MinIO, and other S3-compatible services.
"""

from .client import (
    BucketMetadata,
    CompletedPart,
    ListPage,
    MultipartUpload,
    ObjectMetadata,
    StorageClient,
    StorageError,
)

__all__ = [
    "BucketMetadata",
    "CompletedPart",
    "ListPage",
    "MultipartUpload",
    "ObjectMetadata",
    "StorageClient",
    "StorageError",
]
