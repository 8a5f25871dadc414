"""
Cloudflare R2 / S3-compatible storage client.

Uses boto3 with S3-compatible API to interact with Cloudflare R2.
This is storage-provider agnostic - works with any S3-compatible storage.

All methods are blocking; async callers run them in a worker thread.
"""
import logging
from typing import Optional
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from app.config import settings
from app.storage.exceptions import StorageBackendError, StorageNotConfiguredError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


class R2Client:
    """
    S3-compatible client for Cloudflare R2.

    Provides object upload, existence checks, URL generation and deletion.
    """

    def __init__(self):
        """
        Initialize R2 client with boto3.

        Uses environment variables for configuration.
        Fails gracefully if not configured (returns None client).
        """
        self._client = None
        self._configured = False

        # Check if R2 is configured
        if not all([
            settings.r2_endpoint,
            settings.r2_access_key,
            settings.r2_secret_key
        ]):
            logger.warning(
                "R2 storage not configured. "
                "Set R2_ENDPOINT, R2_ACCESS_KEY, and R2_SECRET_KEY."
            )
            return

        try:
            # Use signature_version='s3v4' for R2 compatibility
            self._client = boto3.client(
                's3',
                endpoint_url=settings.r2_endpoint,
                aws_access_key_id=settings.r2_access_key,
                aws_secret_access_key=settings.r2_secret_key,
                region_name=settings.r2_region,
                config=Config(
                    signature_version='s3v4',
                    s3={'addressing_style': 'path'}  # R2 uses path-style
                )
            )
            self._configured = True
            logger.info(f"R2 client initialized for bucket: {settings.r2_bucket}")

        except NoCredentialsError:
            logger.error("R2 credentials not found or invalid")
        except Exception as e:
            logger.error(f"Failed to initialize R2 client: {e}")

    @property
    def is_configured(self) -> bool:
        """Check if R2 client is properly configured."""
        return self._configured and self._client is not None

    @property
    def bucket(self) -> str:
        """Get configured bucket name."""
        return settings.r2_bucket

    def _require_client(self):
        if not self.is_configured:
            raise StorageNotConfiguredError()
        return self._client

    def upload_object(self, object_key: str, data: bytes, content_type: str) -> None:
        """
        Store bytes under object_key, replacing any existing object.

        Raises:
            StorageNotConfiguredError: If R2 is not configured
            StorageBackendError: If the bucket rejects the write
        """
        client = self._require_client()
        try:
            client.put_object(
                Bucket=self.bucket,
                Key=object_key,
                Body=data,
                ContentType=content_type,
            )
            logger.debug(f"Uploaded {object_key} ({len(data)} bytes) to R2")
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {object_key} to R2: {e}")
            raise StorageBackendError("upload", str(e)) from e

    def check_object_exists(self, object_key: str) -> bool:
        """
        Check if an object exists in the bucket.

        Returns:
            True if object exists, False if the bucket reports it missing

        Raises:
            StorageBackendError: For any other bucket error
        """
        client = self._require_client()
        try:
            client.head_object(Bucket=self.bucket, Key=object_key)
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in _NOT_FOUND_CODES:
                return False
            logger.error(f"Error checking object existence: {e}")
            raise StorageBackendError("head", str(e)) from e
        except BotoCoreError as e:
            raise StorageBackendError("head", str(e)) from e

    def get_object_url(self, object_key: str, expiration: Optional[int] = None) -> str:
        """
        URL clients use to fetch an object.

        With a public base URL configured the URL is stable; otherwise a
        presigned GET URL is generated. The bucket stays private in that case.
        """
        if settings.r2_public_base_url:
            return f"{settings.r2_public_base_url.rstrip('/')}/{object_key}"

        client = self._require_client()
        if expiration is None:
            expiration = settings.r2_presign_expiration

        try:
            url = client.generate_presigned_url(
                ClientMethod='get_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': object_key,
                },
                ExpiresIn=expiration
            )
            logger.debug(f"Generated presigned read URL for {object_key} (expires in {expiration}s)")
            return url
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to generate presigned URL: {e}")
            raise StorageBackendError("presign", str(e)) from e

    def delete_object(self, object_key: str) -> bool:
        """
        Delete an object from the bucket.

        Args:
            object_key: The S3 object key to delete

        Returns:
            True if deletion was successful, False otherwise
        """
        client = self._require_client()
        try:
            client.delete_object(Bucket=self.bucket, Key=object_key)
            logger.debug(f"Deleted object {object_key} from R2")
            return True
        except ClientError as e:
            # If object doesn't exist, consider it a success (idempotent)
            if e.response['Error']['Code'] in _NOT_FOUND_CODES:
                logger.debug(f"Object {object_key} not found in R2 (already deleted)")
                return True
            logger.error(f"Failed to delete object {object_key} from R2: {e}")
            return False
        except BotoCoreError as e:
            logger.error(f"Unexpected error deleting object {object_key} from R2: {e}")
            return False


# Singleton instance
_r2_client: Optional[R2Client] = None


def get_r2_client() -> R2Client:
    """
    Get the singleton R2 client instance.

    Returns:
        R2Client instance (may or may not be configured)
    """
    global _r2_client
    if _r2_client is None:
        _r2_client = R2Client()
    return _r2_client
