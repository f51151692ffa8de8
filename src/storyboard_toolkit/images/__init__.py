"""
Module: images

Purpose:
    Raster operations on storyboard images.

Dependencies:
    - PIL: Image decoding and encoding
"""

from .flipper import (
    ImageDecodeError,
    ImageEncodeError,
    ImageFlipError,
    UnsupportedImageFormatError,
    flip_image,
    resolve_mime_type,
)

__all__ = [
    "ImageDecodeError",
    "ImageEncodeError",
    "ImageFlipError",
    "UnsupportedImageFormatError",
    "flip_image",
    "resolve_mime_type",
]
