"""Loading of caller-supplied reference images into inline base64 data"""
import base64
import mimetypes
import re
from typing import Optional, Tuple

import requests

from ai.exceptions.provider_exceptions import ImageSourceError
from ai.models.image_models import ReferenceImage
from config import IMAGE_FETCH_TIMEOUT

DEFAULT_MIME_TYPE = "image/png"

_DATA_URI_PREFIX = re.compile(r"^data:.*?;base64,")
_DATA_URI_MIME = re.compile(r"^data:(.*?);")


def strip_data_uri(data: str) -> str:
    """Return the bare base64 payload of a data URI (or of bare base64)."""
    return _DATA_URI_PREFIX.sub("", data, count=1)


def mime_type_from_data_uri(data: str) -> Optional[str]:
    if not data.startswith("data:"):
        return None
    match = _DATA_URI_MIME.match(data)
    return match.group(1) if match and match.group(1) else None


def to_data_uri(data: str, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    return f"data:{mime_type};base64,{strip_data_uri(data)}"


def load_image_file(path: str) -> Tuple[str, str]:
    """Read a local image file and return (base64 data, MIME type)."""
    mime_type = mimetypes.guess_type(path)[0] or DEFAULT_MIME_TYPE
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        raise ImageSourceError(f"Failed to read image file {path}: {e}")

    return base64.b64encode(content).decode("ascii"), mime_type


def fetch_image(url: str, timeout: int = IMAGE_FETCH_TIMEOUT) -> Tuple[str, str]:
    """Download a remote image and return (base64 data, MIME type)."""
    try:
        response = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise ImageSourceError(f"Failed to fetch image from URL: {url} ({e})")

    if not response.ok:
        raise ImageSourceError(
            f"Failed to fetch image from URL: {url}", status_code=response.status_code
        )

    content_type = response.headers.get("content-type") or DEFAULT_MIME_TYPE
    mime_type = content_type.split(";")[0].strip() or DEFAULT_MIME_TYPE
    return base64.b64encode(response.content).decode("ascii"), mime_type


def resolve_inline_image(image: ReferenceImage) -> Tuple[str, str]:
    """
    Resolve a reference image to inline (base64 data, MIME type).

    The source is taken in path, url, base64 order. An explicit ``mime_type``
    on the reference wins over whatever the source reports.
    """
    source = image.source
    if source is None:
        raise ImageSourceError("Reference image has no path, url or base64 data")

    if source.kind == "path":
        data, mime_type = load_image_file(source.value)
    elif source.kind == "url":
        data, mime_type = fetch_image(source.value)
    else:
        data = strip_data_uri(source.value)
        mime_type = mime_type_from_data_uri(source.value) or DEFAULT_MIME_TYPE

    return data, image.mime_type or mime_type
