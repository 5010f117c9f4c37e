"""Upload data models."""

import io
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class UploadStatus(str, Enum):
    """Upload status enumeration."""

    QUEUED = "QUEUED"  # Reserved: waiting for admission
    UPLOADING = "UPLOADING"
    PROCESSING = "PROCESSING"  # Reserved: post-upload processing
    CANCELLED = "CANCELLED"  # Reserved: explicit cancellation
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class FolderPath(str, Enum):
    """Destination folders for automatic classification."""

    DEFAULT = "files/"
    IMAGES = "images/"
    DOCUMENTS = "documents/"
    VIDEOS = "videos/"


@dataclass
class FilePayload:
    """A file to upload: content plus the name and type the client declared.

    A stream payload starts wherever the stream was positioned when the
    payload was created; every read rewinds to that position, so the same
    payload can be uploaded more than once.
    """

    name: str
    data: Union[bytes, BinaryIO]
    content_type: str = ""
    size: Optional[int] = None
    _start: int = field(default=0, init=False, repr=False, compare=False)
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray)):
            self._start = self.data.tell()
        if self.size is None:
            self.size = self._measure(self.data)
        if self.size < 0:
            raise ValueError(f"File size must be non-negative, got {self.size}")

    @classmethod
    def from_path(cls, path: Union[str, Path], content_type: str = "") -> "FilePayload":
        """Load a local file into a payload."""
        path = Path(path)
        return cls(name=path.name, data=path.read_bytes(), content_type=content_type)

    def open(self) -> BinaryIO:
        """Return a readable stream positioned at the start of the content."""
        if isinstance(self.data, (bytes, bytearray)):
            return io.BytesIO(self.data)
        self.data.seek(self._start)
        return self.data

    @contextmanager
    def reading(self) -> Iterator[BinaryIO]:
        """Hold the content for one reader at a time.

        Byte payloads get a fresh stream per reader; a stream payload is
        shared, so readers take turns.
        """
        if isinstance(self.data, (bytes, bytearray)):
            yield self.open()
            return
        with self._lock:
            yield self.open()

    @staticmethod
    def _measure(data: Union[bytes, BinaryIO]) -> int:
        if isinstance(data, (bytes, bytearray)):
            return len(data)
        position = data.tell()
        data.seek(0, 2)  # Seek to end
        size = data.tell() - position
        data.seek(position)
        return size


@dataclass
class FileToUpload:
    """Upload request: a file with an optional explicit id, location and metadata.

    ``path`` is a complete storage key used as given; it wins over ``folder``
    and over classification by MIME type.
    """

    file: FilePayload
    id: Optional[str] = None
    folder: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    path: Optional[str] = None


class ProgressEvent(BaseModel):
    """Progress notification for a single upload."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    file_name: str
    progress: int = Field(ge=0, le=100)
    status: UploadStatus
    error: Optional[str] = None
    url: Optional[str] = None

    @model_validator(mode="after")
    def check_status_fields(self) -> "ProgressEvent":
        if self.error is not None and self.status != UploadStatus.FAILED:
            raise ValueError("error is only allowed on FAILED events")
        if self.url is not None and self.status != UploadStatus.COMPLETED:
            raise ValueError("url is only allowed on COMPLETED events")
        return self


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass
class UploadOptions:
    """Options applied to a single upload call."""

    on_progress: Optional[ProgressCallback] = None
    folder: Optional[str] = None
    generate_id: bool = True


class UploadResult(BaseModel):
    """Normalized result of a successful upload."""

    file_id: str
    file_name: str
    url: str
    size: int = Field(ge=0)
    mime_type: str
    metadata: Optional[Dict[str, str]] = None


class PresignedUrl(BaseModel):
    """Presigned URL for a direct client upload."""

    url: str
    key: str
    expires_in: int
