"""Smoke tests for Uplifty exceptions."""

import pytest

from uplifty.core.exceptions import (
    ConfigurationError,
    ProviderNotInitializedError,
    UnsupportedOperationError,
    UnsupportedStorageTypeError,
    UpliftyError,
)


def test_exception_hierarchy():
    """Test that all exceptions inherit from UpliftyError."""
    assert issubclass(ConfigurationError, UpliftyError)
    assert issubclass(UnsupportedStorageTypeError, ConfigurationError)
    assert issubclass(ProviderNotInitializedError, UpliftyError)
    assert issubclass(UnsupportedOperationError, UpliftyError)


def test_unsupported_storage_type_message():
    error = UnsupportedStorageTypeError("gcs")

    assert error.storage_type == "gcs"
    assert str(error) == 'Storage type "gcs" is not supported'


def test_provider_not_initialized_message():
    assert str(ProviderNotInitializedError()) == "No storage provider initialized"


def test_exceptions_can_be_caught_as_base():
    with pytest.raises(UpliftyError):
        raise UnsupportedStorageTypeError("azure")

    with pytest.raises(ConfigurationError):
        raise UnsupportedStorageTypeError("azure")
