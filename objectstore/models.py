"""
Configuration and result models for the object store client.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from .exceptions import StorageError, StorageNotFoundError


# Cloudflare R2 aliases us-east-1 to "auto"
DEFAULT_REGION = "us-east-1"

AWS_ENDPOINT_TEMPLATE = "https://s3.{region}.amazonaws.com"


def resolve_region(region: Optional[str]) -> str:
    """Return the region, falling back to DEFAULT_REGION when unset or blank."""
    if region is None or not region.strip():
        return DEFAULT_REGION
    return region.strip()


def _validate_uri(uri: str) -> str:
    if not uri.startswith(("http://", "https://")):
        raise ValueError(f"Endpoint must start with http:// or https://, got: {uri!r}")
    return uri


@dataclass(frozen=True)
class Endpoint:
    """
    Endpoint selector for S3-compatible storage.

    Either an explicit URI (Cloudflare R2, OVH, MinIO...) or a marker
    asking for the AWS-style URI of the client's region.
    """
    uri: Optional[str] = None

    def __post_init__(self):
        if self.uri is not None:
            _validate_uri(self.uri)

    @classmethod
    def http(cls, uri: str) -> "Endpoint":
        return cls(uri=uri)

    @classmethod
    def from_region(cls) -> "Endpoint":
        return cls(uri=None)

    @classmethod
    def coerce(cls, value: Union["Endpoint", str, None]) -> "Endpoint":
        """Accept an Endpoint, a URI string, or None (derive from region)."""
        if isinstance(value, Endpoint):
            return value
        if value is None:
            return cls.from_region()
        if isinstance(value, str):
            return cls.http(value)
        raise TypeError(f"Unsupported endpoint value: {value!r}")

    @property
    def derives_from_region(self) -> bool:
        return self.uri is None

    def resolve(self, region: str) -> str:
        """Return the endpoint URL for the given region."""
        if self.uri is not None:
            return self.uri
        return AWS_ENDPOINT_TEMPLATE.format(region=region)


class ResultStatus(str, Enum):
    """Outcome of a storage operation."""
    OK = "ok"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class StorageResult:
    """
    Outcome of a single storage operation.

    ``data`` holds the object bytes for a successful ``get``; ``error``
    holds the StorageError for ``not_found`` and ``failed`` outcomes.
    """
    status: ResultStatus
    data: Optional[bytes] = None
    error: Optional[StorageError] = None

    @classmethod
    def success(cls, data: Optional[bytes] = None) -> "StorageResult":
        return cls(status=ResultStatus.OK, data=data)

    @classmethod
    def failure(cls, error: StorageError) -> "StorageResult":
        if isinstance(error, StorageNotFoundError):
            return cls(status=ResultStatus.NOT_FOUND, error=error)
        return cls(status=ResultStatus.FAILED, error=error)

    @property
    def ok(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def not_found(self) -> bool:
        return self.status is ResultStatus.NOT_FOUND

    def unwrap(self) -> Optional[bytes]:
        """Return ``data`` on success, raise the carried error otherwise."""
        if self.error is not None:
            raise self.error
        return self.data


class StorageSettings(BaseModel):
    """
    Connection settings for one bucket.

    Leave ``endpoint_url`` unset to target the AWS endpoint of ``region``.
    """
    bucket_name: str = Field(..., description="Bucket the client operates on")
    access_key_id: str = Field(..., description="API token access key ID")
    secret_access_key: str = Field(..., repr=False, description="API token secret")
    endpoint_url: Optional[str] = Field(
        default=None, description="Explicit endpoint URI (None derives it from region)"
    )
    region: Optional[str] = Field(
        default=None, description="Region name (defaults to us-east-1)"
    )

    @field_validator('bucket_name')
    @classmethod
    def validate_bucket_name(cls, v: str) -> str:
        """Reject blank bucket names."""
        if not v or not v.strip():
            raise ValueError('bucket_name cannot be empty')
        return v.strip()

    @field_validator('endpoint_url')
    @classmethod
    def validate_endpoint_url(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank as unset; otherwise require an HTTP(S) URI."""
        if v is None or not v.strip():
            return None
        return _validate_uri(v.strip())

    def endpoint(self) -> Endpoint:
        return Endpoint.coerce(self.endpoint_url)
