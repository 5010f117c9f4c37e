"""Configuration management for Uplifty.

Two layers live here:

- Storage configuration models. ``UpliftyConfig`` is a tagged union keyed by
  ``type``; each variant is a frozen pydantic model so a configuration cannot
  change after a provider has been built from it.
- Environment settings (``Settings``), used by the HTTP service and by
  ``load_config`` to build a storage configuration from environment variables.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from uplifty.core.exceptions import ConfigurationError, UnsupportedStorageTypeError

DEFAULT_MIME_TYPE = "application/octet-stream"
DEFAULT_MAX_CONCURRENT_UPLOADS = 10


class StorageType(str, Enum):
    """Supported storage types."""

    S3 = "s3"


class S3Config(BaseModel):
    """Credentials and location of an S3-compatible bucket."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    access_key_id: str
    secret_access_key: str
    region: str
    bucket: str
    endpoint_url: Optional[str] = None  # S3-compatible stores (MinIO, R2, ...)


class S3StorageConfig(BaseModel):
    """Storage configuration for the S3 provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    type: StorageType = StorageType.S3
    s3: S3Config
    # Upper bound on in-flight transfers per provider
    max_concurrent_uploads: int = Field(default=DEFAULT_MAX_CONCURRENT_UPLOADS, ge=1)
    default_mime_type: str = DEFAULT_MIME_TYPE


# Union of all supported storage configurations
UpliftyConfig = Union[S3StorageConfig]

CONFIG_MODELS: Dict[StorageType, Type[BaseModel]] = {
    StorageType.S3: S3StorageConfig,
}


def parse_config(raw: Union[BaseModel, Mapping[str, Any]]) -> UpliftyConfig:
    """Resolve a user-supplied configuration into a config model.

    Config models are returned unchanged. Mappings are dispatched on their
    ``type`` tag and validated against the matching variant.

    Args:
        raw: A config model or a mapping (snake_case or camelCase keys)

    Returns:
        The validated configuration model

    Raises:
        UnsupportedStorageTypeError: If the type tag is unknown
        ConfigurationError: If the payload does not match its variant
    """
    if isinstance(raw, tuple(CONFIG_MODELS.values())):
        return raw

    if not isinstance(raw, Mapping):
        raise ConfigurationError(
            f"Configuration must be a mapping or a config model, got {type(raw).__name__}"
        )

    tag = raw.get("type")
    try:
        storage_type = StorageType(tag)
    except ValueError:
        raise UnsupportedStorageTypeError(tag) from None

    model = CONFIG_MODELS[storage_type]
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(
            f'Invalid configuration for storage type "{storage_type.value}": {e}'
        ) from e


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    ENV: str = "local"
    SERVICE_NAME: str = "uplifty"
    SERVICE_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # Storage Configuration
    STORAGE_TYPE: str = "s3"
    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_REGION: str = "us-east-1"
    S3_BUCKET: str = ""
    S3_ENDPOINT_URL: str = ""  # Empty = AWS S3

    # Upload Constraints
    MAX_CONCURRENT_UPLOADS: int = DEFAULT_MAX_CONCURRENT_UPLOADS
    DEFAULT_MIME_TYPE: str = DEFAULT_MIME_TYPE
    MAX_UPLOAD_MB: int = 50

    @property
    def max_upload_bytes(self) -> int:
        """Convert MAX_UPLOAD_MB to bytes."""
        return self.MAX_UPLOAD_MB * 1024 * 1024


def load_config(source: Optional[Settings] = None) -> UpliftyConfig:
    """Build a storage configuration from environment settings.

    Args:
        source: Settings to read from, defaults to the module singleton

    Returns:
        The validated configuration model
    """
    source = source or settings
    return parse_config(
        {
            "type": source.STORAGE_TYPE,
            "s3": {
                "access_key_id": source.S3_ACCESS_KEY_ID,
                "secret_access_key": source.S3_SECRET_ACCESS_KEY,
                "region": source.S3_REGION,
                "bucket": source.S3_BUCKET,
                "endpoint_url": source.S3_ENDPOINT_URL or None,
            },
            "max_concurrent_uploads": source.MAX_CONCURRENT_UPLOADS,
            "default_mime_type": source.DEFAULT_MIME_TYPE,
        }
    )


# Singleton settings instance
settings = Settings()
