"""
File naming and classification helpers.

Maps a file's MIME type or extension to a destination folder, guesses MIME
types from extensions, sanitizes names used as storage keys and generates
file ids. Every function here is pure.
"""

import re
from typing import Dict, Optional
from uuid import uuid4

from uplifty.models.upload import FolderPath

FALLBACK_MIME_TYPE = "application/octet-stream"

# Extension to MIME type lookup for guessing
EXTENSION_MIME_MAP: Dict[str, str] = {
    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    # Documents
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "xls": "application/vnd.ms-excel",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "ppt": "application/vnd.ms-powerpoint",
    "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    # Videos
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "avi": "video/x-msvideo",
    # Text
    "txt": "text/plain",
    "csv": "text/csv",
}

# gif is routed to videos, so it is not part of the image family
IMAGE_PATTERN = re.compile(r"^image/(jpeg|png|webp|tiff)")
VIDEO_PATTERN = re.compile(r"^video/")
DOCUMENT_PATTERN = re.compile(
    r"^application/(pdf|msword|vnd\.openxmlformats-officedocument|vnd\.ms-excel|vnd\.ms-powerpoint)"
)

_WHITESPACE = re.compile(r"\s")
_NON_PRINTABLE_ASCII = re.compile(r"[^\x20-\x7E]")
_UNSAFE_CHARS = re.compile(r"[&/\\#,+()$~%'\":*?<>{}]")


def generate_unique_id() -> str:
    """Generate a unique file id."""
    return str(uuid4())


def sanitize_file_name(file_name: str) -> str:
    """Make a file name safe to use as a storage key.

    Whitespace, characters outside printable ASCII and path- or URL-unsafe
    characters are each replaced with an underscore.

    Examples:
        >>> sanitize_file_name("my report (v2).pdf")
        'my_report__v2_.pdf'
        >>> sanitize_file_name("café.png")
        'caf_.png'
    """
    safe = _WHITESPACE.sub("_", file_name)
    safe = _NON_PRINTABLE_ASCII.sub("_", safe)
    return _UNSAFE_CHARS.sub("_", safe)


def get_destination_folder(mime_type: Optional[str]) -> FolderPath:
    """
    Classify a MIME type into a destination folder.

    The type is lowercased and stripped of parameters before matching, so
    "Image/PNG; q=1" classifies like "image/png".

    Args:
        mime_type: The MIME type string (e.g., "application/pdf")

    Returns:
        FolderPath enum value

    Examples:
        >>> get_destination_folder("image/png")
        <FolderPath.IMAGES: 'images/'>
        >>> get_destination_folder("image/gif")
        <FolderPath.VIDEOS: 'videos/'>
        >>> get_destination_folder("application/x-custom")
        <FolderPath.DEFAULT: 'files/'>
    """
    # Normalize MIME type (lowercase, remove parameters)
    normalized_mime = (mime_type or "").lower().split(";")[0].strip()

    if IMAGE_PATTERN.match(normalized_mime):
        return FolderPath.IMAGES

    if VIDEO_PATTERN.match(normalized_mime) or normalized_mime == "image/gif":
        return FolderPath.VIDEOS

    if DOCUMENT_PATTERN.match(normalized_mime) or normalized_mime == "text/plain":
        return FolderPath.DOCUMENTS

    return FolderPath.DEFAULT


def get_file_extension(file_name: str) -> str:
    """Return the lowercase extension without the dot, or "" if there is none."""
    _, dot, extension = file_name.rpartition(".")
    return extension.lower() if dot else ""


def guess_mime_type(
    file_name: str, default: Optional[str] = FALLBACK_MIME_TYPE
) -> Optional[str]:
    """Guess a MIME type from the file extension.

    Args:
        file_name: The file name
        default: Returned when the extension is unknown

    Returns:
        The MIME type, or ``default`` for unknown extensions
    """
    return EXTENSION_MIME_MAP.get(get_file_extension(file_name), default)
