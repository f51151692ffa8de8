import io
import struct
import sys
import zipfile
from pathlib import Path
from typing import Dict, Union

import pytest
from PIL import Image

# Add src to sys.path so we can import storyboard_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())


SAMPLE_OSB = "\n".join([
    "[Events]",
    "//Background and Video events",
    "//Storyboard Layer 0 (Background)",
    'Sprite,Background,TopLeft,"sb/bg.png",0,100',
    " M,0,100,200,10,50,20,430",
    " R,0,0,500,0.5,-0.5",
    'Animation,Foreground,Centre,"sb/fx.png",320,300,2,120,LoopForever',
    "_MY,0,0,1000,100",
    " F,0,0,1000,1,0",
    "//Storyboard Sound Samples",
])

SAMPLE_OSU = "\n".join([
    "osu file format v14",
    "",
    "[General]",
    "AudioFilename: audio.mp3",
    "",
    "[Events]",
    '0,0,"bg.jpg",0,0',
    'Sprite,Foreground,BottomCentre,"sb\\\\bg.png",320,400',
    "",
    "[TimingPoints]",
    "0,500,4,2,0,100,1,0",
])


def make_image_bytes(width: int = 4, height: int = 3, image_format: str = "PNG") -> bytes:
    """Image whose rows all differ, so a vertical flip is observable."""
    mode = "RGBA" if image_format == "PNG" else "RGB"
    img = Image.new(mode, (width, height))
    for y in range(height):
        for x in range(width):
            color = (x * 40 % 256, y * 80 % 256, (x + y) * 30 % 256)
            img.putpixel((x, y), color + (255 - y * 10,) if mode == "RGBA" else color)
    buffer = io.BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


def make_osz(entries: Dict[str, Union[bytes, str]]) -> bytes:
    """Build an in-memory ZIP archive from a path -> content mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for path, content in entries.items():
            zf.writestr(path, content)
    return buffer.getvalue()


def read_osz(data: bytes) -> Dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


def corrupt_first_entry(data: bytes) -> bytes:
    """Overwrite the start of the first entry's deflate stream with an invalid block header."""
    name_length, extra_length = struct.unpack_from("<HH", data, 26)
    start = 30 + name_length + extra_length
    return data[:start] + b"\xff" * 4 + data[start + 4:]


def mark_first_entry_encrypted(data: bytes) -> bytes:
    """Set the encryption flag of the first central directory record."""
    flags_offset = data.index(b"PK\x01\x02") + 8
    (flags,) = struct.unpack_from("<H", data, flags_offset)
    return data[:flags_offset] + struct.pack("<H", flags | 0x1) + data[flags_offset + 2:]


def rows(data: bytes) -> list:
    """Pixel rows of an encoded image, top to bottom."""
    with Image.open(io.BytesIO(data)) as img:
        width, height = img.size
        pixels = list(img.getdata())
    return [pixels[y * width:(y + 1) * width] for y in range(height)]


@pytest.fixture
def sample_png():
    return make_image_bytes()


@pytest.fixture
def sample_osz(sample_png):
    """Archive with one .osb, one .osu and every image they reference."""
    return make_osz({
        "audio.mp3": b"ID3 not really audio",
        "bg.jpg": make_image_bytes(image_format="JPEG"),
        "song.osb": SAMPLE_OSB,
        "song [Hard].osu": SAMPLE_OSU,
        "sb/bg.png": sample_png,
        "sb/fx0.png": make_image_bytes(2, 5),
        "sb/fx1.png": make_image_bytes(3, 2),
    })
