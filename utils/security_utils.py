"""
Security utilities for image upload validation and sanitization
"""
import re
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from backend.utils.errors import BadRequestError

# Security constants
ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
]

ALLOWED_EXTENSIONS = [".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"]

# 5MB in bytes
MAX_FILE_SIZE = 5 * 1024 * 1024


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal attacks.

    Removes directory separators, traversal sequences, null bytes and any
    character outside letters, digits, dots, hyphens, underscores and spaces.

    Raises:
        ValueError: If nothing usable is left
    """
    if not filename:
        raise ValueError("Filename cannot be empty")

    filename = filename.replace("\x00", "")
    filename = filename.replace("/", "").replace("\\", "")
    while ".." in filename:
        filename = filename.replace("..", "")
    filename = re.sub(r'[^a-zA-Z0-9._\-\s]', '', filename)
    filename = filename.strip('. ')

    if not filename:
        raise ValueError("Filename is invalid after sanitization")
    return filename


def get_file_extension(filename: str) -> str:
    """
    Extract file extension from filename (lowercase).

    Returns:
        File extension with leading dot (e.g., ".png") or empty string
    """
    return Path(filename).suffix.lower()


def validate_file_extension(filename: str) -> None:
    ext = get_file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise BadRequestError(
            f"File extension '{ext}' is not allowed. Allowed extensions: {', '.join(ALLOWED_EXTENSIONS)}"
        )


def detect_mime_type_from_content(content: bytes) -> Optional[str]:
    """
    Detect image MIME type from file signatures (magic bytes).

    Returns:
        Detected MIME type or None if unknown
    """
    if not content:
        return None

    if content[:8] == b'\x89PNG\r\n\x1a\n':
        return "image/png"
    if content[:3] == b'\xff\xd8\xff':
        return "image/jpeg"
    if content[:6] in (b'GIF87a', b'GIF89a'):
        return "image/gif"
    if content[:4] == b'RIFF' and len(content) > 12 and content[8:12] == b'WEBP':
        return "image/webp"
    if b'<svg' in content[:1024].lower():
        return "image/svg+xml"
    return None


def validate_file_content(content: bytes, filename: str) -> None:
    """
    Validate file content (size and detected type).

    Raises:
        BadRequestError: If validation fails
    """
    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        max_mb = MAX_FILE_SIZE / (1024 * 1024)
        raise BadRequestError(f"File size ({size_mb:.2f}MB) exceeds maximum allowed size ({max_mb}MB)")

    if len(content) == 0:
        raise BadRequestError("File is empty")

    detected_mime = detect_mime_type_from_content(content)
    if detected_mime and detected_mime not in ALLOWED_MIME_TYPES:
        raise BadRequestError(f"File type '{detected_mime}' is not allowed")
    if detected_mime is None:
        # Unknown signature, fall back to the extension check
        validate_file_extension(filename)


async def validate_uploaded_image(file: UploadFile) -> tuple[str, bytes]:
    """
    Comprehensive validation of an uploaded image.

    Returns:
        Tuple of (file extension, file content)

    Raises:
        BadRequestError: If any validation fails
    """
    if not file.filename:
        raise BadRequestError("Filename is required")

    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise BadRequestError("Only image files are allowed")

    try:
        sanitized_filename = sanitize_filename(file.filename)
    except ValueError as e:
        raise BadRequestError(str(e))

    validate_file_extension(sanitized_filename)

    content = await file.read()
    validate_file_content(content, sanitized_filename)
    await file.seek(0)

    return get_file_extension(sanitized_filename), content
