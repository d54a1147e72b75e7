from .base import BaseService, IncompleteUploadError
from .bucket_service import SUPPORTED_ACLS, BucketService
from .object_service import ObjectService

__all__ = [
    "BaseService",
    "BucketService",
    "IncompleteUploadError",
    "ObjectService",
    "SUPPORTED_ACLS",
]
