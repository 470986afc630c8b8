"""Saving generated images to local files.

Files go under ``OUTPUT_DIR`` relative to the working directory of the MCP
client that launched the server. Names follow
``<base>_<timestamp>[_<index>].<ext>`` so concurrent writes never collide.
"""
import base64
import binascii
import os
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

import requests

from ai.exceptions.provider_exceptions import ImageSaveError
from ai.models.image_models import GeneratedImage
from config import IMAGE_FETCH_TIMEOUT, OUTPUT_DIR
from media.image_loader import mime_type_from_data_uri, strip_data_uri
from utils.error_handler import handle_error
from utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = "png"
MAX_FILENAME_LENGTH = 64
MAX_NAME_ATTEMPTS = 10

_UNSAFE_CHARS = re.compile(r"[^a-z0-9_\-]+", re.IGNORECASE)


def sanitize_filename(filename: str) -> str:
    """Replace unsafe characters with underscores and cap the length."""
    return _UNSAFE_CHARS.sub("_", filename)[:MAX_FILENAME_LENGTH]


def format_image_size(data: str) -> str:
    """Human readable size of a base64 payload."""
    return f"{int(len(data) / 1024 + 0.5)}KB"


def _extension_from_mime(mime_type: Optional[str]) -> Optional[str]:
    if not mime_type or "/" not in mime_type:
        return None
    subtype = mime_type.split(";")[0].split("/", 1)[1].strip()
    return _normalize_extension(subtype) if subtype else None


def _normalize_extension(ext: str) -> str:
    ext = ext.lower()
    return "jpg" if ext == "jpeg" else ext


def _timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 time with millisecond precision, safe for filenames."""
    now = now or datetime.now(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return re.sub(r"[:.]", "-", iso)


def build_filename(base_filename: str, extension: str, index: Optional[int] = None, now: Optional[datetime] = None) -> str:
    safe_base = sanitize_filename(base_filename or "generated_image")
    stamp = _timestamp(now)
    if index is None:
        return f"{safe_base}_{stamp}.{extension}"
    return f"{safe_base}_{stamp}_{index}.{extension}"


def _decode_inline(image: GeneratedImage) -> Tuple[bytes, str]:
    extension = DEFAULT_EXTENSION
    if image.format:
        extension = _normalize_extension(image.format)
    else:
        extension = _extension_from_mime(mime_type_from_data_uri(image.data)) or extension

    content = base64.b64decode(strip_data_uri(image.data), validate=False)
    return content, extension


def _write_new_file(output_dir: str, base_filename: str, extension: str, index: Optional[int], content: bytes) -> str:
    """Write content under a fresh timestamped name, never replacing an existing file."""
    now = datetime.now(timezone.utc)
    for _ in range(MAX_NAME_ATTEMPTS):
        filepath = os.path.join(output_dir, build_filename(base_filename, extension, index=index, now=now))
        try:
            with open(filepath, "xb") as f:
                f.write(content)
            return filepath
        except FileExistsError:
            # Same base name saved within the same millisecond
            now += timedelta(milliseconds=1)

    raise ImageSaveError(f"No free filename for {base_filename} in {output_dir}")


def _download(image: GeneratedImage) -> Tuple[bytes, str]:
    response = requests.get(image.url, timeout=IMAGE_FETCH_TIMEOUT)
    if not response.ok:
        raise ImageSaveError(
            f"Failed to fetch image from URL: {image.url}", status_code=response.status_code
        )

    extension = DEFAULT_EXTENSION
    if image.format:
        extension = _normalize_extension(image.format)
    else:
        extension = _extension_from_mime(response.headers.get("content-type")) or extension

    return response.content, extension


def save_images(images: Sequence[GeneratedImage], base_filename: str, output_dir: str = OUTPUT_DIR) -> List[str]:
    """
    Write generated images to disk.

    Each image is handled on its own: a failed download or write is logged
    and skipped, and the remaining images are still saved.

    Args:
        images: Images from a generation result
        base_filename: Base name for the files, sanitized before use
        output_dir: Directory to write into, created when missing

    Returns:
        Paths of the files that were written, in image order
    """
    saved_files: List[str] = []

    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        handle_error(e, {"operation": "save_images", "output_dir": output_dir})
        return saved_files

    multiple = len(images) > 1

    for i, image in enumerate(images, start=1):
        try:
            if image.type == "base64" and image.data:
                content, extension = _decode_inline(image)
            elif image.type == "url" and image.url:
                content, extension = _download(image)
            else:
                continue

            filepath = _write_new_file(
                output_dir, base_filename, extension, i if multiple else None, content
            )
            saved_files.append(filepath)
            logger.info(f"Saved image to: {filepath}")

        except (requests.exceptions.RequestException, ImageSaveError, binascii.Error, ValueError, OSError) as e:
            handle_error(e, {"operation": "save_image", "index": i})
            logger.error(f"Failed to save image #{i}")

    return saved_files
