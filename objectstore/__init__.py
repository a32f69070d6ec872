"""Async client package for S3-compatible object storage (Cloudflare R2, OVH, AWS)."""

from .client import ObjectStoreClient
from .exceptions import (
    StorageError,
    StorageConfigError,
    StorageConnectionError,
    StorageAuthError,
    StorageNotFoundError,
    StorageConflictError,
    map_boto_error,
)
from .models import (
    DEFAULT_REGION,
    Endpoint,
    ResultStatus,
    StorageResult,
    StorageSettings,
    resolve_region,
)

__all__ = [
    "ObjectStoreClient",
    "StorageError",
    "StorageConfigError",
    "StorageConnectionError",
    "StorageAuthError",
    "StorageNotFoundError",
    "StorageConflictError",
    "map_boto_error",
    "DEFAULT_REGION",
    "Endpoint",
    "ResultStatus",
    "StorageResult",
    "StorageSettings",
    "resolve_region",
]
