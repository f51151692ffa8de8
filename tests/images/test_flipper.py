"""
Tests for images.flipper

Test Coverage:
- resolve_mime_type(): Extension mapping, case-insensitivity, unsupported formats
- flip_image(): Row reversal, dimensions, format, double flip identity
- Error types for corrupt data and unknown mime types
"""

import io

import pytest
from PIL import Image

from conftest import make_image_bytes, rows
from storyboard_toolkit.images.flipper import (
    ImageDecodeError,
    ImageFlipError,
    UnsupportedImageFormatError,
    flip_image,
    resolve_mime_type,
)


class TestResolveMimeType:

    @pytest.mark.parametrize("path, expected", [
        ("sb/bg.png", "image/png"),
        ("sb/BG.PNG", "image/png"),
        ("sb/photo.jpg", "image/jpeg"),
        ("sb/photo.JPEG", "image/jpeg"),
        ("sb/v1.2/photo.Jpg", "image/jpeg"),
    ])
    def test_resolve_mime_type_when_supported_then_mime(self, path, expected):
        assert resolve_mime_type(path) == expected

    @pytest.mark.parametrize("path", ["sb/anim.gif", "sb/bg.bmp", "sb/noext", "sb.dir/noext"])
    def test_resolve_mime_type_when_unsupported_then_raises(self, path):
        with pytest.raises(UnsupportedImageFormatError):
            resolve_mime_type(path)


class TestFlipImage:

    def test_flip_image_when_png_then_rows_reversed(self, sample_png):
        flipped = flip_image(sample_png, "image/png")
        assert rows(flipped) == list(reversed(rows(sample_png)))

    def test_flip_image_when_png_then_size_mode_and_format_kept(self, sample_png):
        flipped = flip_image(sample_png, "image/png")
        with Image.open(io.BytesIO(sample_png)) as original, Image.open(io.BytesIO(flipped)) as result:
            assert result.size == original.size
            assert result.mode == original.mode
            assert result.format == "PNG"

    def test_flip_image_when_applied_twice_then_identical_pixels(self, sample_png):
        twice = flip_image(flip_image(sample_png, "image/png"), "image/png")
        assert rows(twice) == rows(sample_png)

    def test_flip_image_when_palette_png_then_palette_kept(self):
        img = Image.new("P", (2, 3))
        img.putpalette([0, 0, 0, 255, 0, 0, 0, 255, 0] + [0] * (256 * 3 - 9))
        img.putpixel((0, 0), 1)
        img.putpixel((1, 2), 2)
        buffer = io.BytesIO()
        img.save(buffer, format="PNG")

        flipped = flip_image(buffer.getvalue(), "image/png")
        with Image.open(io.BytesIO(flipped)) as result:
            assert result.mode == "P"
            assert result.getpixel((0, 2)) == 1
            assert result.getpixel((1, 0)) == 2

    def test_flip_image_when_jpeg_then_jpeg_with_same_size(self):
        data = make_image_bytes(16, 8, image_format="JPEG")
        flipped = flip_image(data, "image/jpeg")
        with Image.open(io.BytesIO(flipped)) as result:
            assert result.format == "JPEG"
            assert result.size == (16, 8)

    def test_flip_image_when_jpeg_mime_for_rgba_source_then_converted(self, sample_png):
        flipped = flip_image(sample_png, "image/jpeg")
        with Image.open(io.BytesIO(flipped)) as result:
            assert result.format == "JPEG"
            assert result.mode == "RGB"

    def test_flip_image_when_corrupt_data_then_decode_error(self):
        with pytest.raises(ImageDecodeError):
            flip_image(b"definitely not an image", "image/png")

    def test_flip_image_when_truncated_png_then_decode_error(self, sample_png):
        with pytest.raises(ImageDecodeError):
            flip_image(sample_png[: len(sample_png) // 2], "image/png")

    def test_flip_image_when_unknown_mime_then_unsupported(self, sample_png):
        with pytest.raises(UnsupportedImageFormatError):
            flip_image(sample_png, "image/gif")

    def test_errors_share_base_class(self):
        assert issubclass(ImageDecodeError, ImageFlipError)
        assert issubclass(UnsupportedImageFormatError, ImageFlipError)
