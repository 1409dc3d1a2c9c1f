"""
File handling helpers: extension lookup, MIME type mapping and generated blob names.
"""

import mimetypes
import os
import uuid
from typing import Optional

# Content types served for stored manuscript images, keyed by lowercase extension.
IMAGE_CONTENT_TYPES = {
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"


def get_file_extension(filename: Optional[str]) -> str:
    """
    Return the extension of a filename including the dot, or an empty string.

    Args:
        filename: original filename, may be None

    Returns:
        The extension (e.g. ".png"), or "" when there is none
    """
    if not filename:
        return ""
    _, extension = os.path.splitext(filename)
    return extension


def guess_extension(content_type: Optional[str]) -> str:
    """Best guess of a file extension for a MIME type, or "" if unknown."""
    if not content_type:
        return ""
    if content_type.lower() == "image/jpeg":
        return ".jpg"
    return mimetypes.guess_extension(content_type) or ""


def generate_object_name(filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Generate a collision-free object name for a blob.

    The name is a random uuid4 hex string, suffixed with the extension of the
    original filename (or one derived from the content type) so the content
    type can be inferred again on retrieval. The caller's filename never
    contributes anything but its extension.
    """
    extension = get_file_extension(filename) or guess_extension(content_type)
    return f"{uuid.uuid4().hex}{extension}"


def is_plain_object_name(name: str) -> bool:
    """True if the name cannot escape the storage root (no separators, no dot segments)."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return True


def content_type_for(filename: str) -> str:
    """
    Map a stored image name to the content type it is served with.
    Unrecognised extensions fall back to image/jpeg.
    """
    extension = get_file_extension(filename).lower()
    return IMAGE_CONTENT_TYPES.get(extension, DEFAULT_IMAGE_CONTENT_TYPE)
