"""
Storage Service

Object storage for user uploads. Any provider implementing ObjectStorage
can be plugged in; S3Storage works with MinIO, AWS S3 and other
S3-compatible services by changing the endpoint and credentials.
"""

import json
import logging
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings
from app.core.exceptions import StorageError


logger = logging.getLogger(__name__)


class ObjectStorage(Protocol):
    """Capability required from an object storage provider."""

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

    def public_url(self, key: str) -> str:
        ...


def public_read_policy(bucket: str) -> str:
    """Bucket policy JSON allowing anonymous GET on all objects."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": "*",
                "Action": "s3:GetObject",
                "Resource": f"arn:aws:s3:::{bucket}/*",
            }
        ],
    })


class S3Storage:
    """
    ObjectStorage backed by an S3-compatible bucket.

    boto3 is blocking, so every call runs in the threadpool.
    """

    def __init__(self, client: Any, bucket: str, public_base: str):
        self.client = client
        self.bucket = bucket
        self.public_base = public_base.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3Storage":
        client = boto3.client(
            "s3",
            endpoint_url=settings.STORAGE_ENDPOINT,
            aws_access_key_id=settings.STORAGE_ACCESS_KEY,
            aws_secret_access_key=settings.STORAGE_SECRET_KEY,
            region_name=settings.STORAGE_REGION,
        )
        return cls(client, settings.STORAGE_BUCKET, settings.STORAGE_PUBLIC_BASE)

    def ensure_bucket(self) -> None:
        """
        Create the bucket if missing and make its objects publicly readable.

        Called once at startup; errors propagate so the process does not
        start without working storage.
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code")
            if error_code not in ("404", "NoSuchBucket", "NotFound"):
                raise
            self.client.create_bucket(Bucket=self.bucket)
            logger.info(f"Created bucket {self.bucket!r}")

        self.client.put_bucket_policy(
            Bucket=self.bucket,
            Policy=public_read_policy(self.bucket),
        )

    async def upload(self, key: str, data: bytes, content_type: str) -> None:
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload object {key}: {e}")
            raise StorageError(f"put object {key}") from e

    async def delete(self, key: str) -> None:
        try:
            await run_in_threadpool(
                self.client.delete_object,
                Bucket=self.bucket,
                Key=key,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete object {key}: {e}")
            raise StorageError(f"delete object {key}") from e

    def public_url(self, key: str) -> str:
        """Browser-accessible URL for ``key``."""
        return f"{self.public_base}/{key}"


def resolve_public_url(storage: ObjectStorage, key: Optional[str]) -> Optional[str]:
    if not key:
        return None
    return storage.public_url(key)
