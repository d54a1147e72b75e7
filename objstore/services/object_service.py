"""Object service for uploads and object level operations.

This module provides the upload orchestration: objects smaller than
DEFAULT_PART_SIZE are written with a single PUT, larger ones through a
multipart session that is always either completed or aborted before
create_object returns. Reads, stats and deletes are passed to the transport.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

from objstore.domain import MIN_PART_SIZE
from objstore.domain.chunks import split_parts
from objstore.domain.parts import PartCompletionRegister
from objstore.errors import InvalidArgumentError
from objstore.infra.observability.metrics import UPLOAD_BYTES, UPLOAD_PARTS, UPLOADS
from objstore.infra.storage.client import (
    CompletedPart,
    MultipartUpload,
    ObjectMetadata,
)
from objstore.services.base import BaseService, IncompleteUploadError

# Size from which create_object switches to multipart, and the size of each
# part. Process-wide; read on every call.
DEFAULT_PART_SIZE: int = MIN_PART_SIZE

logger = logging.getLogger("objstore.upload")


class ObjectService(BaseService):
    """Object creation, retrieval, stat and removal."""

    def create_object(
        self,
        bucket: str,
        object_key: str,
        size: int,
        data: BinaryIO,
        *,
        content_type: str | None = None,
    ) -> str:
        """Create an object and return its entity tag.

        You must have WRITE permissions on the bucket. Sources of
        DEFAULT_PART_SIZE bytes or more are uploaded as a multipart session.

        Args:
            bucket: Target bucket name.
            object_key: Object key (path) in the bucket.
            size: Total number of bytes the caller will provide through data.
            data: Readable binary source.
            content_type: MIME type; the configured default when omitted.

        Returns:
            The entity tag reported by the storage service.

        Raises:
            InvalidArgumentError: If bucket, key or size are invalid.
            ChunkReadError: If the source could not be read.
            StorageError: If the single PUT or the session initiation failed.
            IncompleteUploadError: If a part or the completion failed after
                the multipart session was opened.
        """
        bucket = self._ensure_bucket(bucket)
        object_key = self._ensure_object_key(object_key)
        if size < 0:
            raise InvalidArgumentError("size must not be negative")

        part_size = DEFAULT_PART_SIZE
        if size < part_size:
            return self._put_single(bucket, object_key, data, part_size, content_type)
        return self._put_multipart(bucket, object_key, data, part_size, content_type)

    def _put_single(
        self,
        bucket: str,
        object_key: str,
        data: BinaryIO,
        part_size: int,
        content_type: str | None,
    ) -> str:
        chunk = next(split_parts(data, part_size))
        if chunk.error is not None:
            self._record_upload("single", "failed")
            raise chunk.error

        try:
            etag = self._storage.put_object(
                bucket=bucket,
                object_key=object_key,
                length=chunk.length,
                data=chunk.data,
                content_type=content_type,
            )
        except Exception:
            self._record_upload("single", "failed")
            raise

        self._record_upload("single", "success", size=chunk.length)
        logger.info(
            "object_created mode=single bucket=%s key=%s bytes=%d",
            bucket,
            object_key,
            chunk.length,
        )
        return etag

    def _put_multipart(
        self,
        bucket: str,
        object_key: str,
        data: BinaryIO,
        part_size: int,
        content_type: str | None,
    ) -> str:
        try:
            upload = self._storage.init_multipart_upload(
                bucket=bucket,
                object_key=object_key,
                content_type=content_type,
            )
        except Exception:
            self._record_upload("multipart", "failed")
            raise

        register = PartCompletionRegister()
        uploaded_bytes = 0
        for chunk in split_parts(data, part_size):
            if chunk.error is not None:
                self._abort(upload, part_number=chunk.part_number, error=chunk.error)
                raise chunk.error

            try:
                result = self._storage.upload_part(
                    bucket=bucket,
                    object_key=object_key,
                    upload_id=upload.upload_id,
                    part_number=chunk.part_number,
                    length=chunk.length,
                    data=chunk.data,
                )
            except Exception as exc:
                self._abort(upload, part_number=chunk.part_number, error=exc)
                raise IncompleteUploadError(
                    f"Upload of part {chunk.part_number} failed: {exc}",
                    bucket=bucket,
                    object_key=object_key,
                    upload_id=upload.upload_id,
                    part_number=chunk.part_number,
                ) from exc

            register.add(CompletedPart(part_number=chunk.part_number, etag=result.etag))
            uploaded_bytes += chunk.length
            if self._settings.ENABLE_METRICS:
                UPLOAD_PARTS.inc()

        try:
            etag = self._storage.complete_multipart_upload(
                bucket=bucket,
                object_key=object_key,
                upload_id=upload.upload_id,
                parts=register.finalize(),
            )
        except Exception as exc:
            self._abort(upload, part_number=None, error=exc)
            raise IncompleteUploadError(
                f"Completion of multipart upload failed: {exc}",
                bucket=bucket,
                object_key=object_key,
                upload_id=upload.upload_id,
            ) from exc

        self._record_upload("multipart", "success", size=uploaded_bytes)
        logger.info(
            "object_created mode=multipart bucket=%s key=%s parts=%d bytes=%d",
            bucket,
            object_key,
            len(register),
            uploaded_bytes,
        )
        return etag

    def _abort(
        self,
        upload: MultipartUpload,
        *,
        part_number: int | None,
        error: BaseException,
    ) -> None:
        """Abort the session; an abort failure is logged, never raised."""
        try:
            self._storage.abort_multipart_upload(
                bucket=upload.bucket,
                object_key=upload.object_key,
                upload_id=upload.upload_id,
            )
        except Exception as abort_exc:
            logger.warning(
                "multipart_abort_failed upload_id=%s bucket=%s key=%s error=%s",
                upload.upload_id,
                upload.bucket,
                upload.object_key,
                abort_exc,
                extra={
                    "extra": {
                        "upload_id": upload.upload_id,
                        "part_number": part_number,
                        "cause": repr(error),
                        "abort_error": repr(abort_exc),
                    }
                },
            )
        else:
            logger.warning(
                "multipart_upload_aborted upload_id=%s bucket=%s key=%s part_number=%s",
                upload.upload_id,
                upload.bucket,
                upload.object_key,
                part_number if part_number is not None else "-",
                extra={
                    "extra": {
                        "upload_id": upload.upload_id,
                        "part_number": part_number,
                        "cause": repr(error),
                    }
                },
            )
        self._record_upload("multipart", "aborted")

    def _record_upload(self, mode: str, outcome: str, *, size: int = 0) -> None:
        if not self._settings.ENABLE_METRICS:
            return
        UPLOADS.labels(mode, outcome).inc()
        if size:
            UPLOAD_BYTES.inc(size)

    def get_object(
        self,
        bucket: str,
        object_key: str,
        offset: int = 0,
        length: int = 0,
    ) -> tuple[BinaryIO, ObjectMetadata]:
        """Retrieve an object, or ``length`` bytes of it starting at ``offset``.

        A zero length reads to the end of the object. The returned metadata
        describes the whole object, not the requested range.
        """
        bucket = self._ensure_bucket(bucket)
        object_key = self._ensure_object_key(object_key)
        if offset < 0 or length < 0:
            raise InvalidArgumentError("offset and length must not be negative")
        return self._storage.get_object(
            bucket=bucket, object_key=object_key, offset=offset, length=length
        )

    def stat_object(self, bucket: str, object_key: str) -> ObjectMetadata:
        """Verify the object exists and is accessible; return its metadata."""
        bucket = self._ensure_bucket(bucket)
        object_key = self._ensure_object_key(object_key)
        return self._storage.head_object(bucket=bucket, object_key=object_key)

    def delete_object(self, bucket: str, object_key: str) -> None:
        bucket = self._ensure_bucket(bucket)
        object_key = self._ensure_object_key(object_key)
        self._storage.delete_object(bucket=bucket, object_key=object_key)
