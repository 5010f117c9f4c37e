"""Upload API routes."""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from uplifty.client import Uplifty
from uplifty.core.config import load_config, settings
from uplifty.core.exceptions import ConfigurationError
from uplifty.models.upload import FilePayload, UploadOptions, UploadResult

router = APIRouter(prefix="/api/v1", tags=["upload"])
logger = logging.getLogger(__name__)

_uplifty: Optional[Uplifty] = None


def get_uplifty() -> Uplifty:
    """Return the shared Uplifty instance, built from environment settings."""
    global _uplifty
    if _uplifty is None:
        try:
            _uplifty = Uplifty(load_config())
        except ConfigurationError as e:
            logger.error(f"Storage configuration error: {e}")
            raise HTTPException(status_code=500, detail="Storage configuration error")
    return _uplifty


UpliftyDep = Annotated[Uplifty, Depends(get_uplifty)]


@router.post("/upload", response_model=List[UploadResult], status_code=201)
async def upload_files(
    uplifty: UpliftyDep,
    files: List[UploadFile] = File(...),
    folder: Optional[str] = Form(None),
) -> List[UploadResult]:
    """Upload one or more files to the configured storage."""
    payloads = []
    for file in files:
        file.file.seek(0, 2)  # Seek to end
        size_bytes = file.file.tell()
        file.file.seek(0)  # Reset to beginning

        if size_bytes > settings.max_upload_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File size exceeds maximum allowed size of {settings.MAX_UPLOAD_MB}MB",
            )

        payloads.append(
            FilePayload(
                name=file.filename or "unnamed",
                data=file.file,
                content_type=file.content_type or "",
                size=size_bytes,
            )
        )

    try:
        results = await uplifty.upload_multiple(payloads, UploadOptions(folder=folder or None))
    except Exception as e:
        logger.error(f"Failed to store files: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to store file")

    logger.info(
        f"Upload completed: files={len(results)}, folder={folder}",
        extra={"file_ids": [result.file_id for result in results]},
    )
    return results
