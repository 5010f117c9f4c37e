"""Storage provider factory."""

import logging

from uplifty.core.config import StorageType, UpliftyConfig
from uplifty.core.exceptions import UnsupportedStorageTypeError
from uplifty.storage.base import StorageProvider
from uplifty.storage.s3 import S3StorageProvider

logger = logging.getLogger(__name__)


def create_provider(config: UpliftyConfig) -> StorageProvider:
    """Instantiate the provider matching the configuration's type tag.

    Raises:
        UnsupportedStorageTypeError: If no provider exists for the tag
    """
    storage_type = getattr(config, "type", None)

    if storage_type == StorageType.S3:
        provider = S3StorageProvider(config)
    else:
        raise UnsupportedStorageTypeError(getattr(storage_type, "value", storage_type))

    logger.debug("Storage provider created", extra={"provider": provider.get_provider_name()})
    return provider
