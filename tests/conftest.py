import io

import pytest
from PIL import Image

from editorsync.uploads.models import UploadFile


def _image_bytes(size: tuple[int, int], image_format: str, mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color=(200, 80, 40) if mode == "RGB" else (200, 80, 40, 128)).save(
        buf, format=image_format
    )
    return buf.getvalue()


@pytest.fixture()
def small_png() -> UploadFile:
    """A 200x100 PNG well within the compression limits."""
    return UploadFile(name="small.png", content=_image_bytes((200, 100), "PNG"), mime_type="image/png")


@pytest.fixture()
def wide_jpeg() -> UploadFile:
    """A 2400x1200 JPEG that must be downsized."""
    return UploadFile(name="wide.jpg", content=_image_bytes((2400, 1200), "JPEG"), mime_type="image/jpeg")


@pytest.fixture()
def tall_rgba_png() -> UploadFile:
    """A 600x3000 PNG with an alpha channel."""
    return UploadFile(
        name="tall.png",
        content=_image_bytes((600, 3000), "PNG", mode="RGBA"),
        mime_type="image/png",
    )
