"""Abstract storage provider interfaces."""

from abc import ABC, abstractmethod
from typing import Optional

from uplifty.models.upload import FileToUpload, PresignedUrl, UploadOptions, UploadResult


class StorageProvider(ABC):
    """Abstract base class for storage providers.

    Optional capabilities are separate interfaces (``SupportsDelete``,
    ``SupportsPresignedUrl``); callers check for them with ``isinstance``.
    """

    @abstractmethod
    async def upload(
        self, request: FileToUpload, options: Optional[UploadOptions] = None
    ) -> UploadResult:
        """Upload a single file.

        Args:
            request: The file with optional explicit id, folder and metadata
            options: Progress callback, folder override, id generation

        Returns:
            Fully populated upload result

        Raises:
            Exception: The backend's original error when the transfer fails
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return provider identifier."""
        pass


class SupportsDelete(ABC):
    """Capability: delete a stored file."""

    @abstractmethod
    async def delete(self, file_key: str) -> None:
        """Delete the object stored under ``file_key``."""
        pass


class SupportsPresignedUrl(ABC):
    """Capability: issue presigned URLs for direct client uploads."""

    @abstractmethod
    async def get_presigned_url(
        self,
        file_name: str,
        content_type: str,
        expires_in: int = 3600,
        folder: Optional[str] = None,
    ) -> PresignedUrl:
        """Generate a presigned upload URL.

        Args:
            file_name: Name of the file the client will upload
            content_type: MIME type the client will send
            expires_in: Validity in seconds
            folder: Optional folder override

        Returns:
            The URL, the storage key it targets and its validity
        """
        pass
