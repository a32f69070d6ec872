"""
Storage exceptions and botocore error translation.
"""
from typing import Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    PartialCredentialsError,
)


class StorageError(Exception):
    """Base storage error."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        operation: Optional[str] = None,
        key: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.operation = operation
        self.key = key


class StorageConfigError(StorageError):
    """Client configuration could not be built."""
    pass


class StorageConnectionError(StorageError):
    """Storage provider is unreachable or connection failed."""
    pass


class StorageAuthError(StorageError):
    """Storage authentication failed."""
    pass


class StorageNotFoundError(StorageError):
    """Storage resource not found (bucket, object)."""
    pass


class StorageConflictError(StorageError):
    """Bucket state conflicts with the request (already exists, not empty)."""
    pass


NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "NotFound", "404"}

AUTH_CODES = {
    "AccessDenied",
    "InvalidAccessKeyId",
    "SignatureDoesNotMatch",
    "ExpiredToken",
    "InvalidToken",
    "403",
}

CONFLICT_CODES = {"BucketAlreadyExists", "BucketAlreadyOwnedByYou", "BucketNotEmpty"}


def map_boto_error(
    error: Exception,
    operation: str,
    key: Optional[str] = None,
) -> StorageError:
    """
    Translate a botocore exception into a StorageError.

    Args:
        error: Exception raised by the boto3 client
        operation: Name of the storage operation (e.g. "upload")
        key: Object key involved, if any

    Returns:
        StorageError subclass matching the failure, with the original
        exception chained as ``__cause__``
    """
    if isinstance(error, (NoCredentialsError, PartialCredentialsError)):
        mapped = StorageAuthError(
            f"{operation} failed: incomplete or missing credentials",
            operation=operation,
            key=key,
        )
    elif isinstance(error, ClientError):
        code = error.response.get("Error", {}).get("Code", "Unknown")
        message = error.response.get("Error", {}).get("Message") or str(error)
        if code in NOT_FOUND_CODES:
            error_class = StorageNotFoundError
        elif code in AUTH_CODES:
            error_class = StorageAuthError
        elif code in CONFLICT_CODES:
            error_class = StorageConflictError
        else:
            error_class = StorageError
        mapped = error_class(
            f"{operation} failed: {code}: {message}",
            code=code,
            operation=operation,
            key=key,
        )
    elif isinstance(error, BotoCoreError):
        mapped = StorageConnectionError(
            f"{operation} failed: {error}",
            operation=operation,
            key=key,
        )
    else:
        mapped = StorageError(
            f"{operation} failed: {error}",
            operation=operation,
            key=key,
        )

    mapped.__cause__ = error
    return mapped
