"""
Paint Matcher Imaging Utilities
Decodes uploaded wall photos (raw bytes or data URLs) into RGB pixel buffers.
"""
import base64
import binascii
import io
import re
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from paintmatch.config import config
from paintmatch.errors import InvalidInputError

DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


def validate_upload(content_type: Optional[str], filename: Optional[str] = None,
                    size: Optional[int] = None) -> None:
    """
    Validate upload metadata before reading the body.

    Raises:
        InvalidInputError: For oversized files or unsupported formats
    """
    if size is not None and size > config.max_file_bytes():
        raise InvalidInputError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    if content_type not in config.SUPPORTED_MIME_TYPES:
        raise InvalidInputError(
            f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if filename and '.' in filename:
        ext = "." + filename.lower().rsplit('.', 1)[-1]
        if ext not in config.SUPPORTED_EXTENSIONS:
            raise InvalidInputError(
                f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Validate file magic bytes to ensure it's actually an image.

    Returns:
        Detected MIME type

    Raises:
        InvalidInputError: For invalid/corrupt files
    """
    if len(file_bytes) < 8:
        raise InvalidInputError("File too small or corrupt")

    if file_bytes.startswith(b'\xff\xd8\xff'):
        return "image/jpeg"
    elif file_bytes.startswith(b'\x89PNG\r\n\x1a\n'):
        return "image/png"
    else:
        raise InvalidInputError("Invalid image file. Magic bytes don't match supported formats.")


def decode_image_bytes(file_bytes: bytes) -> np.ndarray:
    """
    Decode JPEG/PNG bytes into an RGB pixel buffer.

    Args:
        file_bytes: Raw file bytes

    Returns:
        numpy array (H, W, 3) uint8 in RGB order

    Raises:
        InvalidInputError: For oversized, unsupported or undecodable input
    """
    if len(file_bytes) > config.max_file_bytes():
        raise InvalidInputError(f"File too large. Maximum size: {config.MAX_FILE_MB}MB")

    validate_magic_bytes(file_bytes)

    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        if pil_image.mode != 'RGB':
            pil_image = pil_image.convert('RGB')
        rgb_array = np.array(pil_image, dtype=np.uint8)
    except Image.DecompressionBombError as e:
        raise InvalidInputError(f"Image dimensions too large: {str(e)}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise InvalidInputError(f"Failed to decode image: {str(e)}") from e

    height, width = rgb_array.shape[:2]
    if width == 0 or height == 0:
        raise InvalidInputError(f"Image has zero dimension: {width}×{height}")

    return rgb_array


def decode_data_url(data_url: str) -> np.ndarray:
    """
    Decode a ``data:image/...;base64,`` URL into an RGB pixel buffer.

    Raises:
        InvalidInputError: For malformed URLs or unsupported media types
    """
    match = DATA_URL_RE.match(data_url.strip()) if isinstance(data_url, str) else None
    if match is None:
        raise InvalidInputError("Expected a base64 data URL (data:image/...;base64,...)")

    mime = match.group("mime").lower()
    if mime not in config.SUPPORTED_MIME_TYPES:
        raise InvalidInputError(
            f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    try:
        file_bytes = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidInputError(f"Invalid base64 image data: {str(e)}") from e

    return decode_image_bytes(file_bytes)


def encode_data_url(file_bytes: bytes, mime: str) -> str:
    """Encode raw image bytes as a data URL."""
    return f"data:{mime};base64,{base64.b64encode(file_bytes).decode('ascii')}"
