"""Bucket service for bucket management and listings."""

from __future__ import annotations

from objstore.domain.streaming import ItemStream, enumerate_pages, stream_items
from objstore.errors import InvalidArgumentError
from objstore.infra.observability.metrics import LIST_PAGES
from objstore.infra.storage.client import BucketMetadata, ListPage, ObjectMetadata
from objstore.services.base import BaseService

# Canned ACLs accepted for buckets:
#   private            - owner gets full access
#   public-read        - owner gets full access, others get read access
#   public-read-write  - owner gets full access, others get full access too
#   authenticated-read - owner gets full access, authenticated users read
SUPPORTED_ACLS: frozenset[str] = frozenset(
    {"private", "public-read", "public-read-write", "authenticated-read"}
)


def _validate_acl(acl: str) -> str:
    normalized = (acl or "").strip().lower()
    if normalized not in SUPPORTED_ACLS:
        raise InvalidArgumentError(
            f"Unsupported bucket ACL: {acl!r}. "
            f"Expected one of {', '.join(sorted(SUPPORTED_ACLS))}."
        )
    return normalized


class BucketService(BaseService):
    """Bucket creation, permissions, stat, removal and listing."""

    def create_bucket(self, bucket: str, acl: str = "private") -> None:
        bucket = self._ensure_bucket(bucket)
        self._storage.put_bucket(bucket=bucket, acl=_validate_acl(acl))

    def set_bucket_acl(self, bucket: str, acl: str) -> None:
        """Replace the bucket's canned access control list."""
        bucket = self._ensure_bucket(bucket)
        self._storage.put_bucket_acl(bucket=bucket, acl=_validate_acl(acl))

    def stat_bucket(self, bucket: str) -> None:
        """Verify the bucket exists and you have permission to access it."""
        bucket = self._ensure_bucket(bucket)
        self._storage.head_bucket(bucket=bucket)

    def delete_bucket(self, bucket: str) -> None:
        """Delete the bucket; it must hold no objects."""
        bucket = self._ensure_bucket(bucket)
        self._storage.delete_bucket(bucket=bucket)

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        recursive: bool = False,
    ) -> ItemStream[ObjectMetadata]:
        """List the objects of a bucket as a lazily consumed stream.

        Without ``recursive`` only the first page of entries directly under
        ``prefix`` is returned; with it every key starting with ``prefix`` is
        returned, page after page.

        Usage::

            with storage.list_objects("photos", "2024/", recursive=True) as stream:
                for item in stream:
                    if item.error:
                        raise item.error
                    print(item.data.key)
        """
        bucket = self._ensure_bucket(bucket)
        max_keys = int(self._settings.S3_LIST_MAX_KEYS)

        def fetch_page(marker: str, delimiter: str) -> ListPage[ObjectMetadata]:
            page = self._storage.list_objects(
                bucket=bucket,
                max_keys=max_keys,
                marker=marker,
                prefix=prefix or "",
                delimiter=delimiter,
            )
            self._record_page("objects")
            return page

        return enumerate_pages(
            fetch_page,
            recursive=recursive,
            key=lambda entry: entry.key,
            name=f"objstore-list-{bucket}",
        )

    def list_buckets(self) -> ItemStream[BucketMetadata]:
        """List all buckets owned by the authenticated caller.

        Anonymous requests cannot list buckets.
        """

        def fetch_all() -> list[BucketMetadata]:
            buckets = self._storage.list_buckets()
            self._record_page("buckets")
            return buckets

        return stream_items(fetch_all, name="objstore-list-buckets")

    def _record_page(self, kind: str) -> None:
        if self._settings.ENABLE_METRICS:
            LIST_PAGES.labels(kind).inc()
