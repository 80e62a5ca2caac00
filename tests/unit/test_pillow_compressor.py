import io

import pytest
from PIL import Image

from editorsync.uploads.exceptions import CompressionError
from editorsync.uploads.models import UploadFile
from editorsync.uploads.pillow_compressor import PillowImageCompressor

pytestmark = pytest.mark.asyncio


def _open(file: UploadFile) -> Image.Image:
    return Image.open(io.BytesIO(file.content))


class TestPillowImageCompressor:
    async def test_small_image_is_returned_unchanged(self, small_png: UploadFile) -> None:
        result = await PillowImageCompressor().compress(small_png)

        assert result is small_png

    async def test_wide_image_is_capped_at_max_width(self, wide_jpeg: UploadFile) -> None:
        result = await PillowImageCompressor(max_width=1200).compress(wide_jpeg)

        with _open(result) as img:
            assert img.size == (1200, 600)
            assert img.format == "JPEG"
        assert result.name == wide_jpeg.name
        assert result.mime_type == "image/jpeg"

    async def test_longest_side_is_capped_for_tall_images(self, tall_rgba_png: UploadFile) -> None:
        result = await PillowImageCompressor(max_width=1000).compress(tall_rgba_png)

        with _open(result) as img:
            assert img.size == (200, 1000)
            assert img.format == "PNG"
            assert img.mode == "RGBA"

    async def test_oversized_bytes_trigger_reencode(self, small_png: UploadFile) -> None:
        compressor = PillowImageCompressor(max_size_mb=small_png.size / (1024 * 1024) / 2)

        result = await compressor.compress(small_png)

        assert result is not small_png
        with _open(result) as img:
            assert img.size == (200, 100)

    async def test_unsupported_type_raises(self) -> None:
        file = UploadFile(name="x.svg", content=b"<svg/>", mime_type="image/svg+xml")

        with pytest.raises(CompressionError, match="Unsupported image type"):
            await PillowImageCompressor().compress(file)

    async def test_corrupt_image_raises(self) -> None:
        file = UploadFile(name="broken.png", content=b"not an image", mime_type="image/png")

        with pytest.raises(CompressionError, match="broken.png"):
            await PillowImageCompressor().compress(file)
