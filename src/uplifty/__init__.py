"""
Uplifty

Uploads files to cloud object storage through one small API. A configuration
selects the storage provider (currently S3 and S3-compatible stores); uploads
report normalized progress events and return a normalized result.
"""

from uplifty.client import Uplifty
from uplifty.core.config import (
    S3Config,
    S3StorageConfig,
    Settings,
    StorageType,
    UpliftyConfig,
    load_config,
    parse_config,
)
from uplifty.core.exceptions import (
    ConfigurationError,
    ProviderNotInitializedError,
    UnsupportedOperationError,
    UnsupportedStorageTypeError,
    UpliftyError,
)
from uplifty.models.upload import (
    FilePayload,
    FileToUpload,
    FolderPath,
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
    get_file_extension,
    guess_mime_type,
    sanitize_file_name,
)
from uplifty.storage.s3 import S3StorageProvider

__all__ = [
    "Uplifty",
    "S3Config",
    "S3StorageConfig",
    "Settings",
    "StorageType",
    "UpliftyConfig",
    "load_config",
    "parse_config",
    "UpliftyError",
    "ConfigurationError",
    "UnsupportedStorageTypeError",
    "ProviderNotInitializedError",
    "UnsupportedOperationError",
    "FilePayload",
    "FileToUpload",
    "FolderPath",
    "PresignedUrl",
    "ProgressCallback",
    "ProgressEvent",
    "UploadOptions",
    "UploadResult",
    "UploadStatus",
    "StorageProvider",
    "SupportsDelete",
    "SupportsPresignedUrl",
    "S3StorageProvider",
    "generate_unique_id",
    "get_destination_folder",
    "get_file_extension",
    "guess_mime_type",
    "sanitize_file_name",
]
