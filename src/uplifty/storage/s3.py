"""Amazon S3 (and S3-compatible) storage provider."""

import asyncio
import logging
import threading
import weakref
from typing import Callable, Dict, Optional

import boto3
from botocore.config import Config

from uplifty.core.config import DEFAULT_MIME_TYPE, S3StorageConfig
from uplifty.core.logging import upload_context
from uplifty.models.upload import (
    FilePayload,
    FileToUpload,
    PresignedUrl,
    ProgressCallback,
    ProgressEvent,
    UploadOptions,
    UploadResult,
    UploadStatus,
)
from uplifty.storage.base import StorageProvider, SupportsDelete, SupportsPresignedUrl
from uplifty.storage.naming import (
    generate_unique_id,
    get_destination_folder,
    guess_mime_type,
    sanitize_file_name,
)

logger = logging.getLogger(__name__)


def _percent(transferred: int, total: int) -> int:
    # Round half up, capped at 100
    return min(100, (transferred * 200 + total) // (total * 2))


class _TransferProgress:
    """Turns boto3 byte-count callbacks into percentages.

    boto3 reports the bytes sent since the previous call, possibly from
    several worker threads at once.
    """

    def __init__(self, total: int, on_percent: Callable[[int], None]):
        self._total = total
        self._transferred = 0
        self._lock = threading.Lock()
        self._on_percent = on_percent

    def __call__(self, bytes_amount: int) -> None:
        # Posting under the lock keeps percentages in order across threads
        with self._lock:
            self._transferred += bytes_amount
            if self._transferred and self._total:
                self._on_percent(_percent(self._transferred, self._total))


class S3StorageProvider(StorageProvider, SupportsDelete, SupportsPresignedUrl):
    """S3 storage provider with progress tracking and metadata support."""

    def __init__(self, config: S3StorageConfig):
        """Create the provider and its long-lived S3 client.

        Args:
            config: S3 credentials, bucket and upload defaults

        Raises:
            Exception: Whatever boto3 raises while creating the client
        """
        self.config = config
        # One semaphore per event loop; asyncio primitives are bound to a loop
        self._admission: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()

        try:
            self._client = boto3.client(
                "s3",
                region_name=config.s3.region,
                aws_access_key_id=config.s3.access_key_id,
                aws_secret_access_key=config.s3.secret_access_key,
                endpoint_url=config.s3.endpoint_url,
                config=Config(signature_version="s3v4"),
            )
        except Exception:
            logger.exception(
                "S3 client initialization failed",
                extra={"region": config.s3.region, "bucket": config.s3.bucket},
            )
            raise

    def get_provider_name(self) -> str:
        return "s3"

    async def upload(
        self, request: FileToUpload, options: Optional[UploadOptions] = None
    ) -> UploadResult:
        """Upload a file to S3, reporting progress through ``options.on_progress``.

        The progress callback receives one UPLOADING event at 0%, further
        UPLOADING events as bytes are sent, then exactly one COMPLETED or
        FAILED event. Events are posted to the event loop, never invoked
        inline. On failure the original exception is re-raised.
        """
        options = options or UploadOptions()
        file = request.file

        file_id = request.id or (generate_unique_id() if options.generate_id else file.name)
        file_key = request.path or self.get_file_key(
            file.name,
            file.content_type or guess_mime_type(file.name),
            request.folder or options.folder,
        )
        content_type = (
            file.content_type
            or guess_mime_type(file.name, default=None)
            or self.config.default_mime_type
            or DEFAULT_MIME_TYPE
        )

        notify = self._progress_notifier(options.on_progress, file_id, file.name)

        with upload_context(file_id):
            try:
                notify(0, UploadStatus.UPLOADING)

                metadata = {
                    "content-type": content_type,
                    "file-id": file_id,
                    "storage-path": file_key,
                    "file-type": content_type,
                    "size": str(file.size),
                    "name": sanitize_file_name(file.name),
                    **request.metadata,
                }
                progress = None
                if options.on_progress:
                    progress = _TransferProgress(
                        file.size, lambda percent: notify(percent, UploadStatus.UPLOADING)
                    )

                async with self._admission_slot():
                    await asyncio.to_thread(
                        self._transfer, file, file_key, content_type, metadata, progress
                    )

                url = self.build_object_url(file_key)
                notify(100, UploadStatus.COMPLETED, url=url)
            except Exception as e:
                logger.exception(
                    "S3 upload failed",
                    extra={"file_key": file_key, "bucket": self.config.s3.bucket},
                )
                notify(0, UploadStatus.FAILED, error=str(e) or "Upload failed")
                raise

            logger.info(
                "File uploaded to S3",
                extra={
                    "file_key": file_key,
                    "size": file.size,
                    "content_type": content_type,
                    "bucket": self.config.s3.bucket,
                },
            )

        return UploadResult(
            file_id=file_id,
            file_name=file.name,
            url=url,
            size=file.size,
            mime_type=content_type,
            metadata=dict(request.metadata),
        )

    async def delete(self, file_key: str) -> None:
        """Delete an object from the bucket."""
        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self.config.s3.bucket, Key=file_key
            )
        except Exception:
            logger.exception("S3 delete failed", extra={"file_key": file_key})
            raise

        logger.info(
            "File deleted from S3",
            extra={"file_key": file_key, "bucket": self.config.s3.bucket},
        )

    async def get_presigned_url(
        self,
        file_name: str,
        content_type: str,
        expires_in: int = 3600,
        folder: Optional[str] = None,
    ) -> PresignedUrl:
        """Generate a presigned PUT URL; the key is resolved like an upload's."""
        file_key = self.get_file_key(file_name, content_type, folder)

        url = self._client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.config.s3.bucket,
                "Key": file_key,
                "ContentType": content_type,
            },
            ExpiresIn=expires_in,
            HttpMethod="PUT",
        )

        logger.info(
            "Presigned URL generated",
            extra={"file_key": file_key, "expires_in": expires_in},
        )
        return PresignedUrl(url=url, key=file_key, expires_in=expires_in)

    def get_file_key(
        self, file_name: str, mime_type: Optional[str], folder: Optional[str] = None
    ) -> str:
        """Resolve the storage key for a file.

        An explicit folder wins over classification by MIME type.
        """
        safe_name = sanitize_file_name(file_name)
        if folder:
            normalized_folder = folder if folder.endswith("/") else f"{folder}/"
            return f"{normalized_folder}{safe_name}"

        return f"{get_destination_folder(mime_type).value}{safe_name}"

    def build_object_url(self, file_key: str) -> str:
        """Public URL of an object."""
        bucket = self.config.s3.bucket
        if self.config.s3.endpoint_url:
            return f"{self.config.s3.endpoint_url.rstrip('/')}/{bucket}/{file_key}"
        return f"https://{bucket}.s3.{self.config.s3.region}.amazonaws.com/{file_key}"

    def _admission_slot(self) -> asyncio.Semaphore:
        """Semaphore capping concurrent transfers on the running event loop."""
        loop = asyncio.get_running_loop()
        semaphore = self._admission.get(loop)
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.config.max_concurrent_uploads)
            self._admission[loop] = semaphore
        return semaphore

    def _transfer(
        self,
        file: FilePayload,
        file_key: str,
        content_type: str,
        metadata: Dict[str, str],
        progress: Optional[_TransferProgress],
    ) -> None:
        # Runs in a worker thread; upload_fileobj switches to multipart for large files
        with file.reading() as fileobj:
            self._client.upload_fileobj(
                Fileobj=fileobj,
                Bucket=self.config.s3.bucket,
                Key=file_key,
                ExtraArgs={"ContentType": content_type, "Metadata": metadata},
                Callback=progress,
            )

    @staticmethod
    def _progress_notifier(
        callback: Optional[ProgressCallback], file_id: str, file_name: str
    ) -> Callable[..., None]:
        """Bind a callback to one upload; the result posts events to the running loop."""
        if callback is None:
            return lambda *args, **kwargs: None

        loop = asyncio.get_running_loop()

        def deliver(event: ProgressEvent) -> None:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "Progress callback raised",
                    extra={"file_id": event.file_id, "status": event.status.value},
                )

        def notify(
            progress: int,
            status: UploadStatus,
            error: Optional[str] = None,
            url: Optional[str] = None,
        ) -> None:
            event = ProgressEvent(
                file_id=file_id,
                file_name=file_name,
                progress=progress,
                status=status,
                error=error,
                url=url,
            )
            loop.call_soon_threadsafe(deliver, event)

        return notify
