"""Client-side image downsizing before upload.

Caps the longest side and re-encodes in the original format, stepping JPEG
and WebP quality down until the payload fits the size limit.
"""

import asyncio
import io
from typing import ClassVar

from PIL import Image

from editorsync.logging.logger import Log
from editorsync.uploads.base import BaseImageCompressor
from editorsync.uploads.exceptions import CompressionError
from editorsync.uploads.models import UploadFile


class PillowImageCompressor(BaseImageCompressor):
    """Compresses images with Pillow in a worker thread."""

    FORMATS: ClassVar[dict[str, str]] = {
        "image/jpeg": "JPEG",
        "image/png": "PNG",
        "image/gif": "GIF",
        "image/webp": "WEBP",
    }
    LOSSY_FORMATS: ClassVar[frozenset[str]] = frozenset({"JPEG", "WEBP"})

    def __init__(
        self,
        max_width: int = 1200,
        max_size_mb: float = 2.0,
        initial_quality: int = 85,
        min_quality: int = 40,
    ) -> None:
        self._max_width = max_width
        self._max_bytes = int(max_size_mb * 1024 * 1024)
        self._initial_quality = initial_quality
        self._min_quality = min_quality

    async def compress(self, file: UploadFile) -> UploadFile:
        return await asyncio.to_thread(self._compress_sync, file)

    def _compress_sync(self, file: UploadFile) -> UploadFile:
        image_format = self.FORMATS.get(file.mime_type.lower())
        if image_format is None:
            raise CompressionError(f"Unsupported image type '{file.mime_type}'")

        try:
            with Image.open(io.BytesIO(file.content)) as img:
                img.load()
                if max(img.size) <= self._max_width and file.size <= self._max_bytes:
                    return file
                resized = self._resize(img)
                content = self._encode(resized, image_format)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise CompressionError(f"Cannot process {file.name}: {exc}") from exc

        Log.debug(f"Compressed {file.name}: {file.size} -> {len(content)} bytes")
        return UploadFile(name=file.name, content=content, mime_type=file.mime_type)

    def _resize(self, img: Image.Image) -> Image.Image:
        width, height = img.size
        longest = max(width, height)
        if longest <= self._max_width:
            return img
        scale = self._max_width / longest
        new_size = (max(1, round(width * scale)), max(1, round(height * scale)))
        return img.resize(new_size, Image.LANCZOS)

    def _encode(self, img: Image.Image, image_format: str) -> bytes:
        if image_format == "JPEG" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")

        if image_format not in self.LOSSY_FORMATS:
            return self._save(img, image_format, optimize=True)

        quality = self._initial_quality
        content = self._save(img, image_format, quality=quality)
        while len(content) > self._max_bytes and quality - 10 >= self._min_quality:
            quality -= 10
            content = self._save(img, image_format, quality=quality)
        return content

    @staticmethod
    def _save(img: Image.Image, image_format: str, **params: object) -> bytes:
        buf = io.BytesIO()
        img.save(buf, format=image_format, **params)
        return buf.getvalue()
