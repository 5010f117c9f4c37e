"""Custom exceptions for Uplifty.

Transfer errors raised by the storage backend are not wrapped: they reach the
caller unchanged so backend-specific detail stays inspectable.
"""

from typing import Any, Optional


class UpliftyError(Exception):
    """Base exception for Uplifty."""
    pass


class ConfigurationError(UpliftyError):
    """Exception raised when a storage configuration is invalid."""
    pass


class UnsupportedStorageTypeError(ConfigurationError):
    """Exception raised when the configuration names an unknown storage type."""

    def __init__(self, storage_type: Any):
        self.storage_type = storage_type
        super().__init__(f'Storage type "{storage_type}" is not supported')


class ProviderNotInitializedError(UpliftyError):
    """Exception raised when no storage provider is available for an upload."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "No storage provider initialized")


class UnsupportedOperationError(UpliftyError):
    """Exception raised when a provider lacks an optional capability."""

    def __init__(self, operation: str, provider_name: str):
        self.operation = operation
        self.provider_name = provider_name
        super().__init__(
            f'Storage provider "{provider_name}" does not support "{operation}"'
        )
