"""Public object storage API.

ObjectStorage exposes both the object and the bucket capability groups over
one transport. Use ``new()`` to build one from settings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

from objstore.common.config import Settings, get_settings
from objstore.domain.streaming import ItemStream
from objstore.infra.storage.client import BucketMetadata, ObjectMetadata, StorageClient
from objstore.infra.storage.s3_client import S3StorageClient
from objstore.services.bucket_service import BucketService
from objstore.services.object_service import ObjectService


class ObjectAPI(Protocol):
    """Object read/write/stat operations."""

    def get_object(
        self, bucket: str, object_key: str, offset: int = 0, length: int = 0
    ) -> tuple[BinaryIO, ObjectMetadata]: ...

    def create_object(
        self,
        bucket: str,
        object_key: str,
        size: int,
        data: BinaryIO,
        *,
        content_type: str | None = None,
    ) -> str: ...

    def stat_object(self, bucket: str, object_key: str) -> ObjectMetadata: ...

    def delete_object(self, bucket: str, object_key: str) -> None: ...


class BucketAPI(Protocol):
    """Bucket read/write/stat and listing operations."""

    def create_bucket(self, bucket: str, acl: str = "private") -> None: ...

    def set_bucket_acl(self, bucket: str, acl: str) -> None: ...

    def stat_bucket(self, bucket: str) -> None: ...

    def delete_bucket(self, bucket: str) -> None: ...

    def list_objects(
        self, bucket: str, prefix: str = "", recursive: bool = False
    ) -> ItemStream[ObjectMetadata]: ...

    def list_buckets(self) -> ItemStream[BucketMetadata]: ...


class API(ObjectAPI, BucketAPI, Protocol):
    """Complete object storage interface."""


@dataclass
class ObjectStorage:
    """Lazily constructs the object and bucket services over one transport."""

    storage: StorageClient
    settings: Settings = field(default_factory=get_settings)
    _objects: ObjectService | None = field(default=None, init=False, repr=False)
    _buckets: BucketService | None = field(default=None, init=False, repr=False)

    def objects(self) -> ObjectService:
        if self._objects is None:
            self._objects = ObjectService(self.storage, settings=self.settings)
        return self._objects

    def buckets(self) -> BucketService:
        if self._buckets is None:
            self._buckets = BucketService(self.storage, settings=self.settings)
        return self._buckets

    def get_object(
        self, bucket: str, object_key: str, offset: int = 0, length: int = 0
    ) -> tuple[BinaryIO, ObjectMetadata]:
        return self.objects().get_object(bucket, object_key, offset, length)

    def create_object(
        self,
        bucket: str,
        object_key: str,
        size: int,
        data: BinaryIO,
        *,
        content_type: str | None = None,
    ) -> str:
        return self.objects().create_object(
            bucket, object_key, size, data, content_type=content_type
        )

    def stat_object(self, bucket: str, object_key: str) -> ObjectMetadata:
        return self.objects().stat_object(bucket, object_key)

    def delete_object(self, bucket: str, object_key: str) -> None:
        self.objects().delete_object(bucket, object_key)

    def create_bucket(self, bucket: str, acl: str = "private") -> None:
        self.buckets().create_bucket(bucket, acl)

    def set_bucket_acl(self, bucket: str, acl: str) -> None:
        self.buckets().set_bucket_acl(bucket, acl)

    def stat_bucket(self, bucket: str) -> None:
        self.buckets().stat_bucket(bucket)

    def delete_bucket(self, bucket: str) -> None:
        self.buckets().delete_bucket(bucket)

    def list_objects(
        self, bucket: str, prefix: str = "", recursive: bool = False
    ) -> ItemStream[ObjectMetadata]:
        return self.buckets().list_objects(bucket, prefix, recursive)

    def list_buckets(self) -> ItemStream[BucketMetadata]:
        return self.buckets().list_buckets()


def new(
    settings: Settings | None = None,
    *,
    transport: StorageClient | None = None,
) -> API:
    """Build an object storage client.

    Args:
        settings: Endpoint, credentials and defaults; read from the
            environment when omitted.
        transport: Storage client to use instead of the boto3-backed S3 client.
    """
    resolved = settings or get_settings()
    storage = transport or S3StorageClient(settings=resolved)
    return ObjectStorage(storage=storage, settings=resolved)
