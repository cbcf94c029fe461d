"""Tests for the image store using moto for AWS mocking."""

from urllib.parse import parse_qs, urlparse

import boto3
import pytest
from moto import mock_aws

from news_rewrite.exceptions import StorageError
from news_rewrite.storage import ImageStore

BUCKET = "images"
REGION = "us-east-1"


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never picks up real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def s3_bucket(aws_credentials):
    """Create a mocked bucket for testing."""
    with mock_aws():
        client = boto3.client("s3", region_name=REGION)
        client.create_bucket(Bucket=BUCKET)
        yield client


class TestUpload:
    """Tests for uploading objects."""

    def test_upload_stores_bytes_and_content_type(self, s3_bucket):
        store = ImageStore(bucket=BUCKET, region_name=REGION)

        store.upload("floods-hit-city.png", b"\x89PNG-data", "image/png")

        obj = s3_bucket.get_object(Bucket=BUCKET, Key="floods-hit-city.png")
        assert obj["Body"].read() == b"\x89PNG-data"
        assert obj["ContentType"] == "image/png"

    def test_upload_overwrites_existing_key(self, s3_bucket):
        store = ImageStore(bucket=BUCKET, region_name=REGION)

        store.upload("same.png", b"first", "image/png")
        store.upload("same.png", b"second", "image/png")

        obj = s3_bucket.get_object(Bucket=BUCKET, Key="same.png")
        assert obj["Body"].read() == b"second"

    def test_upload_to_missing_bucket_raises_storage_error(self, aws_credentials):
        with mock_aws():
            store = ImageStore(bucket="nonexistent-bucket", region_name=REGION)

            with pytest.raises(StorageError) as exc_info:
                store.upload("a.png", b"data", "image/png")

            assert "nonexistent-bucket" in str(exc_info.value)
            assert exc_info.value.original_error is not None


class TestSignedUrl:
    """Tests for presigned URL creation."""

    def test_signed_url_points_at_object(self, s3_bucket):
        store = ImageStore(bucket=BUCKET, region_name=REGION)
        store.upload("floods-hit-city.png", b"data", "image/png")

        url = store.signed_url("floods-hit-city.png", expires_in=3600)

        parsed = urlparse(url)
        assert "floods-hit-city.png" in parsed.path
        query = parse_qs(parsed.query)
        assert any(key.lower().endswith("signature") for key in query)

    def test_signed_url_for_missing_object_raises(self, s3_bucket):
        store = ImageStore(bucket=BUCKET, region_name=REGION)

        with pytest.raises(StorageError, match="missing.png"):
            store.signed_url("missing.png")


class TestInitialization:
    """Tests for store initialization."""

    @pytest.mark.parametrize("bucket", ["", "   "])
    def test_store_requires_bucket(self, bucket):
        with pytest.raises(ValueError, match="Bucket name"):
            ImageStore(bucket=bucket)

    def test_store_accepts_custom_endpoint(self, aws_credentials):
        store = ImageStore(
            bucket=BUCKET,
            endpoint_url="https://project.storage.example.com/storage/v1/s3",
            access_key_id="key",
            secret_access_key="secret",
        )

        assert store.bucket == BUCKET
