"""Image helpers for uploads and PDF export."""

import base64
import binascii
import io
import logging
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from .. import config

logger = logging.getLogger(__name__)


def resize_image(data: bytes, max_side: int = config.UPLOAD_MAX_SIDE, quality: int = 80) -> bytes:
    """Shrink an uploaded image to fit a ``max_side`` box and re-encode as JPEG.

    Raises:
        ValueError: If the bytes are not a readable image
    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Not a valid image: {e}") from e

    img.thumbnail((max_side, max_side))
    if img.mode != "RGB":
        img = img.convert("RGB")

    out = io.BytesIO()
    img.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def to_data_url(data: bytes, mime_type: str = "image/jpeg") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_url(url: str) -> Optional[bytes]:
    """Bytes of a base64 ``data:`` URL, or None if it is not one."""
    if not url.startswith("data:") or "," not in url:
        return None
    header, payload = url.split(",", 1)
    if not header.endswith(";base64"):
        return None
    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError):
        return None


async def fetch_image(
    url: Optional[str],
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[bytes]:
    """Load image bytes from an http(s) or data URL.

    Failures are logged and return None so the caller can draw a placeholder.
    """
    if not url:
        return None
    if url.startswith("data:"):
        data = decode_data_url(url)
        if data is None:
            logger.warning("Could not decode data URL image")
        return data

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=config.EXPORT_FETCH_TIMEOUT, follow_redirects=True)
    try:
        response = await http.get(url)
        response.raise_for_status()
        return response.content
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch image {url}: {e}")
        return None
    finally:
        if owns_client:
            await http.aclose()
