"""
Async client for S3-compatible object storage.

Works with Cloudflare R2, OVH Object Storage, AWS S3 and other services
speaking the S3 API. Every method is one request delegated to boto3 and
run in a worker thread.
"""
import os
import asyncio
import logging
from typing import Any, Callable, Optional, Union

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from .exceptions import (
    StorageAuthError,
    StorageConfigError,
    StorageError,
    map_boto_error,
)
from .models import (
    DEFAULT_REGION,
    Endpoint,
    StorageResult,
    StorageSettings,
    resolve_region,
)


logger = logging.getLogger(__name__)


def _build_s3_client(endpoint_url: str, access_key_id: str, secret: str, region: str):
    """Create a boto3 S3 client from a session owned by this client only."""
    session = boto3.session.Session(
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret,
        region_name=region,
    )
    return session.client(
        "s3",
        endpoint_url=endpoint_url,
        config=Config(signature_version="s3v4"),
    )


class ObjectStoreClient:
    """
    Bucket-scoped S3-compatible storage client.

    Example:
        client = await ObjectStoreClient.new(
            "my-bucket",
            "https://<accountid>.r2.cloudflarestorage.com",
            "access-key-id",
            "secret-access-key",
        )
        await client.upload("test", b"Hello world", "max-age=60", "text/plain")
        data = (await client.get("test")).data
    """

    # Signed URL expiry (24 hours)
    URL_EXPIRY_SECONDS = 24 * 60 * 60

    def __init__(
        self,
        bucket_name: str,
        s3_client: Any,
        endpoint: Endpoint,
        region: str = DEFAULT_REGION,
    ):
        """
        Wrap an already configured boto3 client.

        Prefer the ``new``, ``from_settings`` and ``from_env`` factories.

        Args:
            bucket_name: Bucket every operation targets
            s3_client: boto3 S3 client, shared with clones
            endpoint: Endpoint selector the client was built with
            region: Resolved region name
        """
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint = endpoint
        self.endpoint_url = endpoint.resolve(region)
        self._client = s3_client

    @classmethod
    async def new(
        cls,
        bucket_name: str,
        endpoint: Union[Endpoint, str, None],
        access_key_id: str,
        secret: str,
        region: Optional[str] = None,
    ) -> "ObjectStoreClient":
        """
        Build a client for one bucket.

        Args:
            bucket_name: Bucket name
            endpoint: Endpoint selector, a URI string, or None to use the
                AWS endpoint of ``region``
            access_key_id: API token access key ID
            secret: API token secret access key
            region: Region name (defaults to us-east-1, which R2 aliases to auto)

        Returns:
            Configured ObjectStoreClient

        Raises:
            StorageConfigError: The SDK client could not be configured
        """
        region = resolve_region(region)
        try:
            endpoint = Endpoint.coerce(endpoint)
        except (TypeError, ValueError) as e:
            raise StorageConfigError(f"Invalid endpoint: {e}", operation="configure") from e
        endpoint_url = endpoint.resolve(region)

        try:
            s3_client = await asyncio.to_thread(
                _build_s3_client, endpoint_url, access_key_id, secret, region
            )
        except (BotoCoreError, ValueError) as e:
            raise StorageConfigError(
                f"Failed to initialize storage client: {e}",
                operation="configure",
            ) from e

        logger.info(
            f"Initialized storage client for bucket: {bucket_name} "
            f"(endpoint: {endpoint_url}, region: {region})"
        )
        return cls(bucket_name, s3_client, endpoint, region)

    @classmethod
    async def from_settings(cls, settings: StorageSettings) -> "ObjectStoreClient":
        """Build a client from a StorageSettings model."""
        return await cls.new(
            settings.bucket_name,
            settings.endpoint(),
            settings.access_key_id,
            settings.secret_access_key,
            settings.region,
        )

    @classmethod
    async def from_env(cls) -> "ObjectStoreClient":
        """
        Build a client from STORAGE_* environment variables.

        Raises:
            StorageAuthError: A required variable is missing
            StorageConfigError: The settings are invalid or the SDK client
                could not be configured
        """
        bucket_name = os.getenv("STORAGE_BUCKET")
        access_key = os.getenv("STORAGE_ACCESS_KEY_ID")
        secret_key = os.getenv("STORAGE_SECRET_ACCESS_KEY")

        missing = []
        if not bucket_name:
            missing.append("STORAGE_BUCKET")
        if not access_key:
            missing.append("STORAGE_ACCESS_KEY_ID")
        if not secret_key:
            missing.append("STORAGE_SECRET_ACCESS_KEY")
        if missing:
            raise StorageAuthError(
                f"Missing required storage credentials: {', '.join(missing)}. "
                "Check environment variables."
            )

        try:
            settings = StorageSettings(
                bucket_name=bucket_name,
                access_key_id=access_key,
                secret_access_key=secret_key,
                endpoint_url=os.getenv("STORAGE_ENDPOINT"),
                region=os.getenv("STORAGE_REGION"),
            )
        except ValidationError as e:
            raise StorageConfigError(
                f"Invalid storage settings: {e}", operation="configure"
            ) from e
        return await cls.from_settings(settings)

    def clone(self) -> "ObjectStoreClient":
        """Return a client sharing this client's underlying boto3 handle."""
        return ObjectStoreClient(self.bucket_name, self._client, self.endpoint, self.region)

    def get_bucket_name(self) -> str:
        """Get the bucket name of the client."""
        return self.bucket_name

    async def _send(
        self,
        operation: str,
        call: Callable[..., Any],
        key: Optional[str] = None,
        log_response: bool = True,
        **params: Any,
    ) -> Any:
        """Run one blocking SDK call in a worker thread and map its errors."""
        try:
            response = await asyncio.to_thread(call, **params)
        except (ClientError, BotoCoreError) as e:
            logger.debug(f"{operation} error: {e!r}")
            raise map_boto_error(e, operation, key) from e
        if log_response:
            logger.debug(f"{operation} response: {response!r}")
        return response

    async def create_bucket(self) -> StorageResult:
        """
        Create the bucket.

        An existing bucket is reported as a failure carrying a
        StorageConflictError, not as success.
        """
        params = {"Bucket": self.bucket_name}
        # AWS rejects an explicit us-east-1 constraint; other services take none
        if self.endpoint.derives_from_region and self.region != DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        try:
            await self._send("create_bucket", self._client.create_bucket, **params)
        except StorageError as e:
            logger.error(f"Creation of {self.bucket_name} failed: {e}")
            return StorageResult.failure(e)

        logger.info(f"Created successfully {self.bucket_name}")
        return StorageResult.success()

    async def delete_bucket(self) -> StorageResult:
        """Delete the bucket."""
        try:
            await self._send(
                "delete_bucket", self._client.delete_bucket, Bucket=self.bucket_name
            )
        except StorageError as e:
            logger.error(f"Deletion of {self.bucket_name} failed: {e}")
            return StorageResult.failure(e)

        logger.info(f"Deleted successfully {self.bucket_name}")
        return StorageResult.success()

    async def upload(
        self,
        object_name: str,
        object_bytes: bytes,
        cache_control: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> StorageResult:
        """
        Upload an object from memory.

        Cache-Control and Content-Type headers are sent only when given.

        Args:
            object_name: Object key
            object_bytes: Object body
            cache_control: Cache-Control header value (e.g. "max-age=60")
            content_type: Content-Type header value (e.g. "text/plain")

        Returns:
            StorageResult with status ok, not_found (bucket missing) or failed
        """
        params = {
            "Bucket": self.bucket_name,
            "Key": object_name,
            "Body": bytes(object_bytes),
        }
        if cache_control is not None:
            params["CacheControl"] = cache_control
        if content_type is not None:
            params["ContentType"] = content_type

        try:
            await self._send("upload", self._client.put_object, key=object_name, **params)
        except StorageError as e:
            logger.error(f"Upload of {object_name} to {self.bucket_name} failed: {e}")
            return StorageResult.failure(e)

        logger.info(f"Uploaded successfully {object_name} to {self.bucket_name}")
        return StorageResult.success()

    def _read_object(self, **params: Any) -> bytes:
        response = self._client.get_object(**params)
        body = response.pop("Body")
        logger.debug(f"get response: {response!r}")
        return body.read()

    async def get(self, object_name: str) -> StorageResult:
        """
        Download an object into memory.

        Returns:
            StorageResult with the object bytes in ``data`` when found;
            status not_found for a missing key or bucket; failed otherwise
        """
        try:
            data = await self._send(
                "get",
                self._read_object,
                key=object_name,
                log_response=False,
                Bucket=self.bucket_name,
                Key=object_name,
            )
        except StorageError as e:
            logger.error(f"Unable to get {object_name} from {self.bucket_name}: {e}")
            return StorageResult.failure(e)

        logger.info(f"Got successfully {object_name} from {self.bucket_name}")
        return StorageResult.success(data)

    async def get_bytes(self, object_name: str) -> Optional[bytes]:
        """Download an object, returning None when missing or on any failure."""
        result = await self.get(object_name)
        return result.data if result.ok else None

    async def delete(self, object_name: str) -> StorageResult:
        """Delete an object."""
        try:
            await self._send(
                "delete",
                self._client.delete_object,
                key=object_name,
                Bucket=self.bucket_name,
                Key=object_name,
            )
        except StorageError as e:
            logger.error(f"Deletion of {object_name} from {self.bucket_name} failed: {e}")
            return StorageResult.failure(e)

        logger.info(f"Deleted successfully {object_name} from {self.bucket_name}")
        return StorageResult.success()

    def presigned_get_url(self, object_name: str, expires_in: Optional[int] = None) -> str:
        """
        Generate a signed GET URL for an object.

        Signing happens locally; no request is sent.

        Args:
            object_name: Object key
            expires_in: Validity in seconds (defaults to 24 hours)

        Returns:
            Signed URL

        Raises:
            StorageError: URL generation failed
        """
        if expires_in is None:
            expires_in = self.URL_EXPIRY_SECONDS
        try:
            url = self._client.generate_presigned_url(
                'get_object',
                Params={
                    'Bucket': self.bucket_name,
                    'Key': object_name,
                },
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise map_boto_error(e, "presign", object_name) from e

        logger.debug(f"Generated signed URL for {object_name} (expires in {expires_in}s)")
        return url

    def __repr__(self) -> str:
        return (
            f"ObjectStoreClient(bucket_name={self.bucket_name!r}, "
            f"endpoint_url={self.endpoint_url!r}, region={self.region!r})"
        )
