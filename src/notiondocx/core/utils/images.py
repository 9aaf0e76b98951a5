"""Image download, dimension decoding, and display scaling"""

import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from notiondocx.errors import ImageFetchError


logger = logging.getLogger(__name__)


def fetch_image(url: str, timeout: float = 30.0) -> bytes:
    """Download raw image bytes; any transport or HTTP status failure raises ImageFetchError."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise ImageFetchError(f"Could not fetch image {url}: {e}") from e
    return response.content


def image_size(data: bytes) -> tuple[int, int]:
    """Return (width, height) in pixels decoded from the image header."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError) as e:
        raise ImageFetchError(f"Could not decode image: {e}") from e


def fit_width(width: float, height: float, max_width: float) -> tuple[float, float]:
    """Scale both axes down proportionally when width exceeds max_width."""
    if width > max_width:
        scale = width / max_width
        width /= scale
        height /= scale
    return width, height
