"""
Image decode/encode helpers for the upgrader package.

Wraps Pillow so that callers only see DecodeError on bad payloads and
OSError on failed writes.
"""

from __future__ import annotations

import io
import os
import shutil
import tempfile
from pathlib import Path

from ..errors import DecodeError
from .dependencies import Image, UnidentifiedImageError

# Modes each target format can store directly
_DEFAULT_MODES = {'1', 'L', 'P', 'RGB', 'RGBA'}
_WRITABLE_MODES = {
    'JPEG': {'1', 'L', 'RGB', 'CMYK'},
    'PNG': {'1', 'L', 'LA', 'P', 'RGB', 'RGBA', 'I', 'I;16'},
    'GIF': {'1', 'L', 'P', 'RGB', 'RGBA'},
    'BMP': {'1', 'L', 'P', 'RGB', 'RGBA'},
    'ICO': {'1', 'L', 'LA', 'P', 'RGB', 'RGBA'},
    'WEBP': {'RGB', 'RGBA'},
}

# Pillow's ICO encoder stops at 256x256
ICO_MAX_DIMENSION = 256

# Temporary files must not match the extension allowlist
TEMP_PREFIX = '.finch-'
TEMP_SUFFIX = '.finch-tmp'


def decode_image(data: bytes) -> Image.Image:
    """
    Decode raw bytes into a fully loaded PIL image.

    Raises:
        DecodeError: If the payload is empty, unsupported, truncated or too large
    """
    if not data:
        raise DecodeError("Empty image payload")
    try:
        img = Image.open(io.BytesIO(data))
        # Force load to detect truncated images early
        img.load()
        return img
    except UnidentifiedImageError as e:
        raise DecodeError(f"Not a valid image: {e}") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(f"Image too large: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Corrupt or truncated image: {e}") from e


def format_for_path(filepath: str | Path) -> str:
    """Return the Pillow format name that matches a file extension."""
    ext = os.path.splitext(str(filepath))[1].lower()
    fmt = Image.registered_extensions().get(ext)
    if fmt is None:
        raise ValueError(f"No image format registered for extension '{ext}'")
    return fmt


def reduce_to_8bit(img: Image.Image) -> Image.Image:
    """
    Map 16-bit and 32-bit grayscale images onto 8-bit 'L'.

    Integer modes are scaled down by 256 rather than clipped, so a 16-bit
    picture keeps its contrast. Other modes are returned unchanged.
    """
    if img.mode.startswith('I;16'):
        img = img.convert('I')
    if img.mode == 'I':
        return img.point(lambda v: v * (1 / 256)).convert('L')
    if img.mode == 'F':
        return img.convert('L')
    return img


def writable_image(img: Image.Image, fmt: str) -> Image.Image:
    """Convert `img` to a mode that Pillow can store as `fmt`."""
    allowed = _WRITABLE_MODES.get(fmt, _DEFAULT_MODES)
    if img.mode in allowed:
        return img

    img = reduce_to_8bit(img)
    if img.mode in allowed:
        return img

    has_alpha = 'A' in img.mode or 'transparency' in img.info
    return img.convert('RGBA' if has_alpha and 'RGBA' in allowed else 'RGB')


def save_image(img: Image.Image, filepath: str | Path) -> tuple[int, int]:
    """
    Write an image over `filepath`, keeping the format implied by its extension.

    The image is written to a temporary file in the same directory and then
    moved into place, so a failed write leaves the original untouched. The
    original's permission bits are carried over.

    Returns:
        (width, height) of the image actually written

    Raises:
        OSError: If the file cannot be written
        ValueError: If the extension has no matching format, or the image is
            larger than the format can hold
    """
    filepath = str(filepath)
    fmt = format_for_path(filepath)

    params = {}
    if fmt == 'ICO':
        if img.width > ICO_MAX_DIMENSION or img.height > ICO_MAX_DIMENSION:
            raise ValueError(
                f"ICO files cannot hold {img.width}x{img.height} "
                f"(max {ICO_MAX_DIMENSION}x{ICO_MAX_DIMENSION})"
            )
        params['sizes'] = [img.size]

    img = writable_image(img, fmt)

    directory = os.path.dirname(os.path.abspath(filepath))
    fd, tmp_path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=directory)
    try:
        with os.fdopen(fd, 'wb') as f:
            img.save(f, format=fmt, **params)
        if os.path.exists(filepath):
            shutil.copymode(filepath, tmp_path)
        os.replace(tmp_path, filepath)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    return img.size


__all__ = [
    'decode_image',
    'format_for_path',
    'reduce_to_8bit',
    'writable_image',
    'save_image',
]
