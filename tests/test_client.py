"""Tests for the Uplifty facade."""

import asyncio
import io
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from uplifty import Uplifty
from uplifty.core.config import S3StorageConfig
from uplifty.core.exceptions import (
    ConfigurationError,
    ProviderNotInitializedError,
    UnsupportedOperationError,
    UnsupportedStorageTypeError,
)
from uplifty.models.upload import FilePayload, FileToUpload, UploadOptions, UploadStatus
from uplifty.storage.base import StorageProvider
from uplifty.storage.s3 import S3StorageProvider

RAW_CONFIG = {
    "type": "s3",
    "s3": {
        "accessKeyId": "test-access-key",
        "secretAccessKey": "test-secret-key",
        "region": "eu-west-1",
        "bucket": "test-bucket",
    },
}


class UploadOnlyProvider(StorageProvider):
    """Provider without optional capabilities."""

    async def upload(self, request, options=None):
        raise NotImplementedError

    def get_provider_name(self) -> str:
        return "upload-only"


@pytest.fixture
def uplifty(s3_config, mock_boto3_client):
    return Uplifty(s3_config)


class TestConstruction:
    """Tests for provider resolution at construction."""

    def test_resolves_s3_provider(self, uplifty):
        assert isinstance(uplifty.provider, S3StorageProvider)

    def test_get_config_returns_model_verbatim(self, uplifty, s3_config):
        assert uplifty.get_config() is s3_config

    def test_get_config_from_mapping_merges_defaults(self, mock_boto3_client):
        uplifty = Uplifty(RAW_CONFIG)

        config = uplifty.get_config()
        assert isinstance(config, S3StorageConfig)
        assert config.s3.access_key_id == "test-access-key"
        assert config.s3.secret_access_key == "test-secret-key"
        assert config.s3.bucket == "test-bucket"
        assert config.max_concurrent_uploads == 10
        assert config.default_mime_type == "application/octet-stream"

    def test_unsupported_storage_type(self):
        with patch("uplifty.storage.s3.boto3.client") as mock_factory:
            with pytest.raises(UnsupportedStorageTypeError, match='"gcs" is not supported'):
                Uplifty({**RAW_CONFIG, "type": "gcs"})

        mock_factory.assert_not_called()

    def test_unsupported_type_on_unvalidated_model(self, s3_config):
        forged = S3StorageConfig.model_construct(type="azure", s3=s3_config.s3)

        with pytest.raises(UnsupportedStorageTypeError):
            Uplifty(forged)

    def test_invalid_payload(self):
        with pytest.raises(ConfigurationError):
            Uplifty({"type": "s3"})

    def test_backend_client_failure_propagates(self, s3_config):
        with patch("uplifty.storage.s3.boto3.client", side_effect=RuntimeError("boom")):
            with pytest.raises(RuntimeError, match="boom"):
                Uplifty(s3_config)


class TestUpload:
    """Tests for single uploads through the facade."""

    @pytest.mark.asyncio
    async def test_upload_bare_payload(self, uplifty, mock_boto3_client):
        result = await uplifty.upload(FilePayload(name="cat.png", data=b"meow", content_type="image/png"))

        assert result.file_name == "cat.png"
        assert result.size == 4
        assert result.url == "https://test-bucket.s3.eu-west-1.amazonaws.com/images/cat.png"
        mock_boto3_client.upload_fileobj.assert_called_once()

    @pytest.mark.asyncio
    async def test_metadata_round_trip(self, uplifty):
        file = FilePayload(name="contract.pdf", data=b"%PDF-1.7")

        result = await uplifty.upload(FileToUpload(file=file, metadata={"userId": "12345"}))

        assert result.metadata == {"userId": "12345"}

    @pytest.mark.asyncio
    async def test_without_provider(self, uplifty):
        uplifty._provider = None

        with pytest.raises(ProviderNotInitializedError):
            await uplifty.upload(FilePayload(name="a.txt", data=b"a"))

    @pytest.mark.asyncio
    async def test_failure_reaches_caller_and_callback(self, uplifty, mock_boto3_client, drain_events):
        error = ClientError({"Error": {"Code": "SlowDown", "Message": "Reduce rate"}}, "PutObject")
        mock_boto3_client.upload_fileobj.side_effect = error
        events = []

        with pytest.raises(ClientError) as exc_info:
            await uplifty.upload(
                FilePayload(name="a.txt", data=b"a"), UploadOptions(on_progress=events.append)
            )
        await drain_events()

        assert exc_info.value is error
        assert events[-1].status == UploadStatus.FAILED
        assert events[-1].error


class TestUploadMultiple:
    """Tests for multi-file uploads."""

    @pytest.mark.asyncio
    async def test_empty_input(self, uplifty):
        provider = MagicMock()
        provider.upload = AsyncMock()
        uplifty._provider = provider

        assert await uplifty.upload_multiple([]) == []
        provider.upload.assert_not_called()

    @pytest.mark.asyncio
    async def test_all_succeed(self, uplifty, mock_boto3_client):
        files = [
            FilePayload(name="a.png", data=b"a", content_type="image/png"),
            FilePayload(name="b.mp4", data=b"bb", content_type="video/mp4"),
        ]

        results = await uplifty.upload_multiple(files)

        assert [r.file_name for r in results] == ["a.png", "b.mp4"]
        assert [r.url.rsplit("/", 2)[-2] for r in results] == ["images", "videos"]
        assert mock_boto3_client.upload_fileobj.call_count == 2

    @pytest.mark.asyncio
    async def test_same_stream_payload_twice(self, uplifty, mock_boto3_client):
        bodies = []

        def reading_upload(Fileobj, Bucket, Key, ExtraArgs, Callback=None):
            bodies.append(Fileobj.read())

        mock_boto3_client.upload_fileobj.side_effect = reading_upload
        file = FilePayload(name="hello.txt", data=io.BytesIO(b"hello"))

        results = await uplifty.upload_multiple([file, file])

        assert bodies == [b"hello", b"hello"]
        assert [r.size for r in results] == [5, 5]

    @pytest.mark.asyncio
    async def test_each_upload_gets_own_events(self, uplifty, drain_events):
        events = []
        files = [
            FileToUpload(file=FilePayload(name="a.txt", data=b"a"), id="id-a"),
            FileToUpload(file=FilePayload(name="b.txt", data=b"b"), id="id-b"),
        ]

        await uplifty.upload_multiple(files, UploadOptions(on_progress=events.append))
        await drain_events()

        for file_id in ("id-a", "id-b"):
            statuses = [e.status for e in events if e.file_id == file_id]
            assert statuses[0] == UploadStatus.UPLOADING
            assert statuses.count(UploadStatus.COMPLETED) == 1

    @pytest.mark.asyncio
    async def test_one_failure_fails_aggregate(self, uplifty, mock_boto3_client):
        def fake_upload(Fileobj, Bucket, Key, ExtraArgs, Callback=None):
            if Key.endswith("b.txt"):
                raise ClientError({"Error": {"Code": "500", "Message": "oops"}}, "PutObject")

        mock_boto3_client.upload_fileobj.side_effect = fake_upload
        files = [FilePayload(name="a.txt", data=b"a"), FilePayload(name="b.txt", data=b"b")]

        with pytest.raises(ClientError):
            await uplifty.upload_multiple(files)

        # Let the sibling upload settle; it is not rolled back
        await asyncio.sleep(0.05)
        keys = [c.kwargs["Key"] for c in mock_boto3_client.upload_fileobj.call_args_list]
        assert sorted(keys) == ["documents/a.txt", "documents/b.txt"]
        mock_boto3_client.delete_object.assert_not_called()


class TestOptionalCapabilities:
    """Tests for delete and presigned URL delegation."""

    @pytest.mark.asyncio
    async def test_delete(self, uplifty, mock_boto3_client):
        await uplifty.delete("files/a.bin")

        mock_boto3_client.delete_object.assert_called_once_with(Bucket="test-bucket", Key="files/a.bin")

    @pytest.mark.asyncio
    async def test_presigned_url(self, uplifty, mock_boto3_client):
        mock_boto3_client.generate_presigned_url.return_value = "https://signed.example"

        presigned = await uplifty.get_presigned_url("a.pdf", "application/pdf", expires_in=60)

        assert presigned.url == "https://signed.example"
        assert presigned.key == "documents/a.pdf"
        assert presigned.expires_in == 60

    @pytest.mark.asyncio
    async def test_missing_capabilities(self, uplifty):
        uplifty._provider = UploadOnlyProvider()

        with pytest.raises(UnsupportedOperationError) as exc_info:
            await uplifty.delete("files/a.bin")
        assert exc_info.value.operation == "delete"
        assert exc_info.value.provider_name == "upload-only"

        with pytest.raises(UnsupportedOperationError):
            await uplifty.get_presigned_url("a.pdf", "application/pdf")
