# utils/validation.py
"""
Upload validation helpers.

Checks an incoming media file against the MIME whitelist and the size
limit before anything touches the disk.
"""

import os
import re
from fastapi import HTTPException, UploadFile

from config import config

ALLOWED_MIME_TYPES = {
    "image/jpeg": "image",
    "image/png": "image",
    "image/webp": "image",
    "video/mp4": "video",
    "video/quicktime": "video",
    "video/webm": "video",
}

INVALID_TYPE_MESSAGE = "Invalid file type. Only JPEG, PNG, WEBP, MP4, MOV, and WEBM files are allowed."


def sanitize_filename(name: str) -> str:
    """
    Sanitize a filename by removing dangerous characters.

    Args:
        name: Original filename

    Returns:
        Sanitized filename safe for filesystem
    """
    name = os.path.basename(name.replace("\\", "/"))
    sanitized = re.sub(r'[<>:"/\\|?*\s]', '_', name)
    sanitized = sanitized.strip('. ')
    return sanitized[:200] or "upload"


def file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def validate_upload_file(file: UploadFile, expected_type: str, max_size: int = None) -> str:
    """
    Validate an uploaded media file.

    Args:
        file: The multipart upload
        expected_type: "image" or "video", the kind the endpoint accepts
        max_size: Size limit in bytes (defaults to MAX_UPLOAD_SIZE)

    Returns:
        The media kind of the file ("image" or "video")
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    content_type = (file.content_type or "").split(";")[0].strip().lower()
    file_type = ALLOWED_MIME_TYPES.get(content_type)
    if file_type is None:
        raise HTTPException(status_code=400, detail=INVALID_TYPE_MESSAGE)

    if file_type != expected_type:
        raise HTTPException(
            status_code=400,
            detail=f"This endpoint only accepts {expected_type} files, received {content_type}"
        )

    limit = max_size if max_size is not None else config.MAX_UPLOAD_SIZE
    if file_size(file) > limit:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {limit // (1024 * 1024)}MB"
        )

    return file_type
