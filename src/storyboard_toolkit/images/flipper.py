"""
Module: images.flipper

Purpose:
    Flip storyboard images across their horizontal midline. Output row y is
    input row (height - 1 - y); dimensions, mode and palette are preserved
    and the image is re-encoded in its original format.

Key Functions:
    - resolve_mime_type(): Map an archive path to image/png or image/jpeg
    - flip_image(): Decode, flip top-to-bottom and re-encode bytes

Key Classes:
    - ImageFlipError: Base for per-image failures
    - UnsupportedImageFormatError, ImageDecodeError, ImageEncodeError

Dependencies:
    - PIL/Pillow: Decoding, transposition and encoding

Used By:
    - pipeline.controller: Image flipping phase
"""

from __future__ import annotations

import logging
import struct
from io import BytesIO
from typing import Any, Dict

from PIL import Image

logger = logging.getLogger(__name__)

PNG_MIME = "image/png"
JPEG_MIME = "image/jpeg"

MIME_TYPES: Dict[str, str] = {
    "png": PNG_MIME,
    "jpg": JPEG_MIME,
    "jpeg": JPEG_MIME,
}

# Pillow format names per mime type
_PIL_FORMATS: Dict[str, str] = {
    PNG_MIME: "PNG",
    JPEG_MIME: "JPEG",
}

# Modes the JPEG encoder accepts as-is
_JPEG_MODES = {"1", "L", "RGB", "CMYK"}

DEFAULT_JPEG_QUALITY = 95


class ImageFlipError(Exception):
    """Error flipping a single image."""
    pass


class UnsupportedImageFormatError(ImageFlipError):
    """Image extension or mime type is not PNG or JPEG."""
    pass


class ImageDecodeError(ImageFlipError):
    """Image bytes could not be decoded."""
    pass


class ImageEncodeError(ImageFlipError):
    """Flipped image could not be re-encoded."""
    pass


def resolve_mime_type(path: str) -> str:
    """
    Resolve the mime type of an archive image path from its extension.

    Args:
        path: Archive entry path like "sb/bg.PNG"

    Returns:
        "image/png" or "image/jpeg"

    Raises:
        UnsupportedImageFormatError: For any other extension

    Example:
        >>> resolve_mime_type("sb/Light.JPG")
        'image/jpeg'
    """
    _, dot, extension = path.rpartition(".")
    mime_type = MIME_TYPES.get(extension.lower()) if dot else None
    if mime_type is None:
        raise UnsupportedImageFormatError(f"Unsupported image format: {path}")
    return mime_type


def flip_image(
    data: bytes,
    mime_type: str,
    *,
    jpeg_quality: int = DEFAULT_JPEG_QUALITY,
) -> bytes:
    """
    Flip an encoded image top-to-bottom.

    Args:
        data: Encoded PNG or JPEG bytes
        mime_type: "image/png" or "image/jpeg" - also the output format
        jpeg_quality: Encoder quality used when re-encoding JPEG

    Returns:
        Encoded bytes of the flipped image, same format and dimensions

    Raises:
        UnsupportedImageFormatError: mime_type is not PNG or JPEG
        ImageDecodeError: data is not a decodable image
        ImageEncodeError: the flipped image could not be encoded

    Example:
        >>> flipped = flip_image(zf.read("sb/bg.png"), resolve_mime_type("sb/bg.png"))
    """
    image_format = _PIL_FORMATS.get(mime_type)
    if image_format is None:
        raise UnsupportedImageFormatError(f"Unsupported mime type: {mime_type}")

    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            flipped = image.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
            save_options = _save_options(image, image_format, jpeg_quality)
    except (OSError, SyntaxError, ValueError, struct.error, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Failed to decode image: {e}") from e

    if image_format == "JPEG" and flipped.mode not in _JPEG_MODES:
        flipped = flipped.convert("RGB")

    output = BytesIO()
    try:
        flipped.save(output, format=image_format, **save_options)
    except (OSError, ValueError, KeyError) as e:
        raise ImageEncodeError(f"Failed to encode {image_format}: {e}") from e

    logger.debug(f"Flipped {flipped.width}x{flipped.height} {image_format} ({len(data)} -> {output.tell()} bytes)")
    return output.getvalue()


def _save_options(image: Image.Image, image_format: str, jpeg_quality: int) -> Dict[str, Any]:
    """Encoder options that keep the source image's metadata."""
    options: Dict[str, Any] = {}
    if "icc_profile" in image.info:
        options["icc_profile"] = image.info["icc_profile"]
    if "dpi" in image.info:
        options["dpi"] = image.info["dpi"]

    if image_format == "PNG":
        if "transparency" in image.info:
            options["transparency"] = image.info["transparency"]
    else:
        options["quality"] = jpeg_quality
    return options
