"""Uplifty facade: the single entry point for uploads."""

import asyncio
import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

from uplifty.core.config import UpliftyConfig, parse_config
from uplifty.core.exceptions import ProviderNotInitializedError, UnsupportedOperationError
from uplifty.models.upload import (
    FilePayload,
    FileToUpload,
    PresignedUrl,
    UploadOptions,
    UploadResult,
)
from uplifty.storage.base import StorageProvider, SupportsDelete, SupportsPresignedUrl
from uplifty.storage.factory import create_provider

logger = logging.getLogger(__name__)

UploadInput = Union[FilePayload, FileToUpload]


class Uplifty:
    """Uploads files to the storage backend selected by the configuration.

    The provider is resolved once, at construction. An unsupported storage
    type raises from the constructor, so no half-initialized instance exists.

    Example:
        uplifty = Uplifty({
            "type": "s3",
            "s3": {
                "accessKeyId": "...",
                "secretAccessKey": "...",
                "region": "eu-west-1",
                "bucket": "my-bucket",
            },
        })
        result = await uplifty.upload(FilePayload(name="cat.png", data=b"..."))
    """

    def __init__(self, config: Union[UpliftyConfig, Mapping[str, Any]]):
        self._provider: Optional[StorageProvider] = None
        self._config = parse_config(config)
        self._provider = create_provider(self._config)

    @property
    def provider(self) -> Optional[StorageProvider]:
        return self._provider

    async def upload(
        self, file: UploadInput, options: Optional[UploadOptions] = None
    ) -> UploadResult:
        """Upload a single file.

        Args:
            file: A bare payload, or a request carrying id, folder and metadata
            options: Progress callback, folder override, id generation

        Returns:
            The upload result

        Raises:
            ProviderNotInitializedError: If no provider was resolved
        """
        if self._provider is None:
            raise ProviderNotInitializedError()

        request = file if isinstance(file, FileToUpload) else FileToUpload(file=file)
        return await self._provider.upload(request, options)

    async def upload_multiple(
        self, files: Sequence[UploadInput], options: Optional[UploadOptions] = None
    ) -> List[UploadResult]:
        """Upload several files concurrently.

        Fails as soon as any upload fails. Uploads that already finished are
        not rolled back and their results are not returned.
        """
        if not files:
            return []

        logger.info("Uploading files", extra={"file_count": len(files)})
        results = await asyncio.gather(*(self.upload(file, options) for file in files))
        return list(results)

    async def delete(self, file_key: str) -> None:
        """Delete a stored file, if the provider supports it."""
        provider = self._require(SupportsDelete, "delete")
        await provider.delete(file_key)

    async def get_presigned_url(
        self,
        file_name: str,
        content_type: str,
        expires_in: int = 3600,
        folder: Optional[str] = None,
    ) -> PresignedUrl:
        """Generate a presigned upload URL, if the provider supports it."""
        provider = self._require(SupportsPresignedUrl, "get_presigned_url")
        return await provider.get_presigned_url(
            file_name, content_type, expires_in=expires_in, folder=folder
        )

    def get_config(self) -> UpliftyConfig:
        """Return the configuration, secrets included."""
        return self._config

    def _require(self, capability: type, operation: str) -> Any:
        if self._provider is None:
            raise ProviderNotInitializedError()
        if not isinstance(self._provider, capability):
            raise UnsupportedOperationError(operation, self._provider.get_provider_name())
        return self._provider
