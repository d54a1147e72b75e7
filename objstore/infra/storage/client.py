"""Storage transport protocol and data types.

This module defines the low-level interface the object storage core drives:
multipart session calls, single-shot puts, object and bucket requests, and
marker-based listing. Request signing, HTTP and XML marshaling live behind it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Generic, Protocol, Sequence, TypeVar

from objstore.errors import ObjectStorageError

T = TypeVar("T")


class StorageError(ObjectStorageError, RuntimeError):
    """Raised when a transport request to the storage service fails."""


@dataclass(frozen=True, slots=True)
class CompletedPart:
    """Represents a completed part in a multipart upload."""

    part_number: int
    etag: str


@dataclass(frozen=True, slots=True)
class MultipartUpload:
    """Result of initiating a multipart upload."""

    upload_id: str
    bucket: str
    object_key: str


@dataclass(frozen=True, slots=True)
class ObjectMetadata:
    """Metadata of a stored object, from HEAD, GET or a listing entry."""

    key: str
    size_bytes: int
    etag: str | None = None
    content_type: str | None = None
    last_modified: datetime | None = None


@dataclass(frozen=True, slots=True)
class BucketMetadata:
    """A bucket owned by the authenticated caller."""

    name: str
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class ListPage(Generic[T]):
    """One page of a marker-based listing."""

    items: list[T] = field(default_factory=list)
    is_truncated: bool = False
    next_marker: str = ""


class StorageClient(Protocol):
    """Protocol defining the transport the object storage core requires.

    Every method raises StorageError when the underlying request fails.
    """

    def init_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        content_type: str | None = None,
    ) -> MultipartUpload:
        """Initialize a multipart upload session.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            content_type: MIME type of the object.

        Returns:
            MultipartUpload containing the upload_id for subsequent operations.
        """
        ...

    def upload_part(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
        part_number: int,
        length: int,
        data: BinaryIO,
    ) -> CompletedPart:
        """Upload one part of a multipart session.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            upload_id: Multipart upload ID from init_multipart_upload.
            part_number: Part number (1-based, max 10000).
            length: Exact number of bytes readable from data.
            data: Part payload.

        Returns:
            CompletedPart carrying the ETag the service assigned to the part.
        """
        ...

    def complete_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
        parts: Sequence[CompletedPart],
    ) -> str:
        """Complete a multipart upload by combining all parts.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            upload_id: Multipart upload ID.
            parts: Completed parts, ascending by part number.

        Returns:
            ETag of the assembled object.
        """
        ...

    def abort_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
    ) -> None:
        """Abort a multipart upload and discard uploaded parts."""
        ...

    def put_object(
        self,
        *,
        bucket: str,
        object_key: str,
        length: int,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Upload a whole object in one request and return its ETag."""
        ...

    def get_object(
        self,
        *,
        bucket: str,
        object_key: str,
        offset: int = 0,
        length: int = 0,
    ) -> tuple[BinaryIO, ObjectMetadata]:
        """Download an object, or a byte range of it when offset/length are set."""
        ...

    def head_object(self, *, bucket: str, object_key: str) -> ObjectMetadata:
        """Get object metadata without downloading the content."""
        ...

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object from storage."""
        ...

    def put_bucket(self, *, bucket: str, acl: str) -> None:
        """Create a bucket with the given canned ACL."""
        ...

    def put_bucket_acl(self, *, bucket: str, acl: str) -> None:
        """Replace the canned ACL of an existing bucket."""
        ...

    def head_bucket(self, *, bucket: str) -> None:
        """Check the bucket exists and is accessible."""
        ...

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket."""
        ...

    def list_objects(
        self,
        *,
        bucket: str,
        max_keys: int,
        marker: str,
        prefix: str,
        delimiter: str,
    ) -> ListPage[ObjectMetadata]:
        """Fetch one page of object entries.

        Args:
            bucket: Bucket to list.
            max_keys: Upper bound of entries in the page.
            marker: Key after which the page starts; empty for the first page.
            prefix: Only keys starting with prefix are returned.
            delimiter: When "/", entries below the next "/" are rolled up.
        """
        ...

    def list_buckets(self) -> list[BucketMetadata]:
        """List all buckets owned by the authenticated sender."""
        ...
