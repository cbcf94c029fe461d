"""S3-compatible object storage for generated images."""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from news_rewrite.config import MAX_SIGNED_URL_EXPIRY
from news_rewrite.exceptions import StorageError

logger = logging.getLogger(__name__)


class ImageStore:
    """Uploads objects to a bucket and hands out presigned read URLs."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        region_name: str = "us-east-1",
    ) -> None:
        """Initialize the store.

        Args:
            bucket: Bucket that receives the images.
            endpoint_url: Endpoint of an S3-compatible service; AWS S3 if None.
            access_key_id: Access key; the default boto3 credential chain if None.
            secret_access_key: Secret key paired with ``access_key_id``.
            region_name: Region used for signing.

        Raises:
            ValueError: If bucket is empty or whitespace.
        """
        if not bucket or not bucket.strip():
            raise ValueError("Bucket name must not be empty or whitespace")

        self.bucket = bucket
        self._client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region_name,
        )

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        """Store ``data`` under ``key``, replacing any existing object.

        Raises:
            StorageError: If the service rejects the upload.
        """
        logger.info("Uploading %s to bucket %s (%d bytes)", key, self.bucket, len(data))
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"Upload of '{key}' to bucket '{self.bucket}' failed: {e}",
                original_error=e,
            ) from e

    def signed_url(self, key: str, expires_in: int = MAX_SIGNED_URL_EXPIRY) -> str:
        """Return a presigned GET URL for ``key``.

        Raises:
            StorageError: If the object is missing or signing fails.
        """
        try:
            # Presigning never touches the network, so check the object exists first.
            self._client.head_object(Bucket=self.bucket, Key=key)
            url = self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(
                f"Signed URL creation for '{key}' failed: {e}",
                original_error=e,
            ) from e

        if not url:
            raise StorageError(f"No signed URL received for '{key}'")
        return url
