"""S3-compatible storage transport implementation.

This module provides the transport the object storage core drives against
AWS S3, MinIO, and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import platform
from typing import TYPE_CHECKING, Any, BinaryIO, Sequence

from objstore import __version__
from objstore.infra.storage.client import (
    BucketMetadata,
    CompletedPart,
    ListPage,
    MultipartUpload,
    ObjectMetadata,
    StorageError,
)

if TYPE_CHECKING:
    from objstore.common.config import Settings

LIBRARY_NAME = "objstore"


def user_agent_suffix() -> str:
    """User agent fragment identifying this library, its OS and architecture."""
    return (
        f"{LIBRARY_NAME}/{__version__} "
        f"({platform.system().lower()}; {platform.machine().lower()})"
    )


def _object_metadata(key: str, response: dict[str, Any]) -> ObjectMetadata:
    size = response.get("ContentLength", response.get("Size"))
    return ObjectMetadata(
        key=key,
        size_bytes=int(size) if size is not None else 0,
        etag=response.get("ETag"),
        content_type=response.get("ContentType"),
        last_modified=response.get("LastModified"),
    )


class S3StorageClient:
    """S3-compatible storage transport.

    Supports AWS S3, MinIO, and other S3-compatible services.
    Uses boto3 for signing, HTTP and XML marshaling.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Initialize the S3 client with configuration from settings.

        Args:
            settings: Settings containing S3 endpoint and credentials.

        Raises:
            StorageError: If boto3 is not installed.
        """
        self._settings = settings
        self._client = self._build_client(settings)

    @staticmethod
    def _build_client(settings: "Settings") -> Any:
        """Create a boto3 S3 client from settings."""
        try:
            import boto3
            from botocore.config import Config
        except ImportError as exc:
            raise StorageError(
                "boto3 and botocore are required for the S3 transport. "
                "Install with: pip install boto3"
            ) from exc

        addressing_style = (settings.S3_ADDRESSING_STYLE or "path").strip().lower()
        config = Config(
            s3={"addressing_style": addressing_style},
            user_agent_extra=user_agent_suffix(),
        )

        return boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            use_ssl=bool(settings.S3_USE_SSL),
            config=config,
        )

    def _content_type(self, content_type: str | None) -> str:
        return content_type or self._settings.S3_CONTENT_TYPE

    def init_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        content_type: str | None = None,
    ) -> MultipartUpload:
        """Initialize a multipart upload session."""
        try:
            response = self._client.create_multipart_upload(
                Bucket=bucket,
                Key=object_key,
                ContentType=self._content_type(content_type),
            )
        except Exception as exc:
            raise StorageError(f"Failed to create multipart upload: {exc}") from exc

        upload_id = response.get("UploadId")
        if not upload_id:
            raise StorageError("S3 response missing UploadId")

        return MultipartUpload(
            upload_id=str(upload_id),
            bucket=bucket,
            object_key=object_key,
        )

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
        """Upload one part of a multipart session."""
        try:
            response = self._client.upload_part(
                Bucket=bucket,
                Key=object_key,
                UploadId=upload_id,
                PartNumber=int(part_number),
                ContentLength=int(length),
                Body=data,
            )
        except Exception as exc:
            raise StorageError(
                f"Failed to upload part {part_number}: {exc}"
            ) from exc

        etag = response.get("ETag")
        if not etag:
            raise StorageError(f"S3 response missing ETag for part {part_number}")

        return CompletedPart(part_number=int(part_number), etag=str(etag))

    def complete_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
        parts: Sequence[CompletedPart],
    ) -> str:
        """Complete a multipart upload by combining all parts."""
        multipart_payload = {
            "Parts": [
                {"ETag": part.etag, "PartNumber": int(part.part_number)}
                for part in parts
            ]
        }

        try:
            response = self._client.complete_multipart_upload(
                Bucket=bucket,
                Key=object_key,
                UploadId=upload_id,
                MultipartUpload=multipart_payload,
            )
        except Exception as exc:
            raise StorageError(f"Failed to complete multipart upload: {exc}") from exc

        return str(response.get("ETag") or "")

    def abort_multipart_upload(
        self,
        *,
        bucket: str,
        object_key: str,
        upload_id: str,
    ) -> None:
        """Abort a multipart upload and clean up uploaded parts."""
        try:
            self._client.abort_multipart_upload(
                Bucket=bucket,
                Key=object_key,
                UploadId=upload_id,
            )
        except Exception as exc:
            raise StorageError(f"Failed to abort multipart upload: {exc}") from exc

    def put_object(
        self,
        *,
        bucket: str,
        object_key: str,
        length: int,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Upload a whole object in a single request."""
        try:
            response = self._client.put_object(
                Bucket=bucket,
                Key=object_key,
                ContentLength=int(length),
                ContentType=self._content_type(content_type),
                Body=data,
            )
        except Exception as exc:
            raise StorageError(f"Failed to put object: {exc}") from exc

        return str(response.get("ETag") or "")

    def get_object(
        self,
        *,
        bucket: str,
        object_key: str,
        offset: int = 0,
        length: int = 0,
    ) -> tuple[BinaryIO, ObjectMetadata]:
        """Download an object, optionally limited to a byte range."""
        params: dict[str, Any] = {"Bucket": bucket, "Key": object_key}
        if length > 0:
            params["Range"] = f"bytes={offset}-{offset + length - 1}"
        elif offset > 0:
            params["Range"] = f"bytes={offset}-"

        try:
            response = self._client.get_object(**params)
        except Exception as exc:
            raise StorageError(f"Failed to get object: {exc}") from exc

        # For ranged reads the ETag is still the whole object's ETag
        return response["Body"], _object_metadata(object_key, response)

    def head_object(self, *, bucket: str, object_key: str) -> ObjectMetadata:
        """Get object metadata without downloading the content."""
        try:
            response = self._client.head_object(Bucket=bucket, Key=object_key)
        except Exception as exc:
            raise StorageError(f"Failed to get object metadata: {exc}") from exc

        return _object_metadata(object_key, response)

    def delete_object(self, *, bucket: str, object_key: str) -> None:
        """Delete an object from storage."""
        try:
            self._client.delete_object(Bucket=bucket, Key=object_key)
        except Exception as exc:
            raise StorageError(f"Failed to delete object: {exc}") from exc

    def put_bucket(self, *, bucket: str, acl: str) -> None:
        """Create a bucket in the configured region."""
        params: dict[str, Any] = {"Bucket": bucket, "ACL": acl}
        region = (self._settings.S3_REGION or "").strip()
        # us-east-1 rejects an explicit LocationConstraint
        if region and region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            self._client.create_bucket(**params)
        except Exception as exc:
            raise StorageError(f"Failed to create bucket: {exc}") from exc

    def put_bucket_acl(self, *, bucket: str, acl: str) -> None:
        """Replace the canned ACL of a bucket."""
        try:
            self._client.put_bucket_acl(Bucket=bucket, ACL=acl)
        except Exception as exc:
            raise StorageError(f"Failed to set bucket ACL: {exc}") from exc

    def head_bucket(self, *, bucket: str) -> None:
        """Check that a bucket exists and is accessible."""
        try:
            self._client.head_bucket(Bucket=bucket)
        except Exception as exc:
            raise StorageError(f"Failed to get bucket metadata: {exc}") from exc

    def delete_bucket(self, *, bucket: str) -> None:
        """Delete an empty bucket."""
        try:
            self._client.delete_bucket(Bucket=bucket)
        except Exception as exc:
            raise StorageError(f"Failed to delete bucket: {exc}") from exc

    def list_objects(
        self,
        *,
        bucket: str,
        max_keys: int,
        marker: str,
        prefix: str,
        delimiter: str,
    ) -> ListPage[ObjectMetadata]:
        """Fetch one page of a ListObjects (v1) listing."""
        params: dict[str, Any] = {
            "Bucket": bucket,
            "MaxKeys": int(max_keys),
            "Prefix": prefix or "",
            "Delimiter": delimiter or "",
        }
        if marker:
            params["Marker"] = marker

        try:
            response = self._client.list_objects(**params)
        except Exception as exc:
            raise StorageError(f"Failed to list objects: {exc}") from exc

        items = [
            _object_metadata(str(entry["Key"]), entry)
            for entry in response.get("Contents") or []
        ]
        return ListPage(
            items=items,
            is_truncated=bool(response.get("IsTruncated")),
            next_marker=str(response.get("NextMarker") or ""),
        )

    def list_buckets(self) -> list[BucketMetadata]:
        """List all buckets owned by the authenticated sender."""
        try:
            response = self._client.list_buckets()
        except Exception as exc:
            raise StorageError(f"Failed to list buckets: {exc}") from exc

        return [
            BucketMetadata(
                name=str(entry["Name"]),
                created_at=entry.get("CreationDate"),
            )
            for entry in response.get("Buckets") or []
        ]
