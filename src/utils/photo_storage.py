"""Profile photo storage.

Saving a photo never fails the surrounding request: any problem is logged and
the caller simply gets no photo URL back.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from config import (
    MAX_PROFILE_PHOTO_SIZE,
    PROFILE_PHOTO_DIR,
    PROFILE_PHOTO_DIR_NAME,
    UPLOADS_DIR_NAME,
)

logger = logging.getLogger(__name__)


def save_profile_photo(
    file: Optional[UploadFile], target_dir: Optional[Path] = None
) -> Optional[str]:
    """Store an uploaded profile photo.

    Args:
        file: Uploaded file, may be None.
        target_dir: Directory the photo is written to, defaults to
            PROFILE_PHOTO_DIR.

    Returns:
        The public URL path of the stored photo, or None if nothing was
        stored.
    """
    if file is None or not file.filename:
        return None
    try:
        if not (file.content_type or "").startswith("image/"):
            raise ValueError("File must be an image")

        # Read one byte past the limit to detect oversized uploads
        content = file.file.read(MAX_PROFILE_PHOTO_SIZE + 1)
        if not content:
            return None
        if len(content) > MAX_PROFILE_PHOTO_SIZE:
            raise ValueError(
                f"File size exceeds {MAX_PROFILE_PHOTO_SIZE // (1024 * 1024)}MB limit"
            )

        target_dir = target_dir or PROFILE_PHOTO_DIR
        target_dir.mkdir(parents=True, exist_ok=True)
        unique_name = f"{uuid.uuid4()}_{Path(file.filename).name}"
        (target_dir / unique_name).write_bytes(content)
        return f"/{UPLOADS_DIR_NAME}/{PROFILE_PHOTO_DIR_NAME}/{unique_name}"
    except Exception as e:
        logger.warning("Profile photo upload failed: %s", e)
        return None
