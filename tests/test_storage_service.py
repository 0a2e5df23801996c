"""
Storage Service Unit Tests

Tests for the S3-compatible object storage provider using a mocked
boto3 client.
"""

import json
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from app.core.exceptions import StorageError
from app.services.storage_service import S3Storage, public_read_policy, resolve_public_url


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def storage(s3_client) -> S3Storage:
    return S3Storage(s3_client, "avatars", "http://localhost:9000/avatars/")


class TestEnsureBucket:
    """Tests for S3Storage.ensure_bucket."""

    def test_existing_bucket_is_not_recreated(self, storage, s3_client):
        storage.ensure_bucket()

        s3_client.create_bucket.assert_not_called()
        s3_client.put_bucket_policy.assert_called_once()

    def test_missing_bucket_is_created(self, storage, s3_client):
        s3_client.head_bucket.side_effect = client_error("404", "HeadBucket")

        storage.ensure_bucket()

        s3_client.create_bucket.assert_called_once_with(Bucket="avatars")
        s3_client.put_bucket_policy.assert_called_once_with(
            Bucket="avatars",
            Policy=public_read_policy("avatars"),
        )

    def test_other_errors_propagate(self, storage, s3_client):
        s3_client.head_bucket.side_effect = client_error("403", "HeadBucket")

        with pytest.raises(ClientError):
            storage.ensure_bucket()

        s3_client.create_bucket.assert_not_called()


class TestObjects:
    """Tests for upload, delete and public_url."""

    @pytest.mark.asyncio
    async def test_upload(self, storage, s3_client):
        await storage.upload("u/abc.png", b"data", "image/png")

        s3_client.put_object.assert_called_once_with(
            Bucket="avatars",
            Key="u/abc.png",
            Body=b"data",
            ContentType="image/png",
        )

    @pytest.mark.asyncio
    async def test_upload_failure_raises_storage_error(self, storage, s3_client):
        s3_client.put_object.side_effect = EndpointConnectionError(endpoint_url="http://localhost:9000")

        with pytest.raises(StorageError):
            await storage.upload("u/abc.png", b"data", "image/png")

    @pytest.mark.asyncio
    async def test_delete(self, storage, s3_client):
        await storage.delete("u/abc.png")

        s3_client.delete_object.assert_called_once_with(Bucket="avatars", Key="u/abc.png")

    @pytest.mark.asyncio
    async def test_delete_failure_raises_storage_error(self, storage, s3_client):
        s3_client.delete_object.side_effect = client_error("500", "DeleteObject")

        with pytest.raises(StorageError):
            await storage.delete("u/abc.png")

    def test_public_url(self, storage):
        assert storage.public_url("u/abc.png") == "http://localhost:9000/avatars/u/abc.png"

    def test_resolve_public_url_without_key(self, storage):
        assert resolve_public_url(storage, None) is None
        assert resolve_public_url(storage, "") is None


def test_public_read_policy_grants_get_object():
    statement = json.loads(public_read_policy("avatars"))["Statement"][0]

    assert statement["Effect"] == "Allow"
    assert statement["Action"] == "s3:GetObject"
    assert statement["Resource"] == "arn:aws:s3:::avatars/*"
