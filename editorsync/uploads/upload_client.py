import asyncio
from collections.abc import AsyncIterator

import httpx

from editorsync.uploads.base import BaseImageUploader, ProgressCallback
from editorsync.uploads.exceptions import (
    UploadNetworkError,
    UploadRejectedError,
    UploadTimeoutError,
)
from editorsync.uploads.models import UploadFile


class ImageUploadClient(BaseImageUploader):
    """Multipart image upload over httpx with a hard overall timeout.

    The multipart body is encoded up front and streamed in chunks so upload
    progress can be reported as bytes leave the client.
    """

    UPLOAD_PATH = "/api/blog/upload-image"
    FIELD_NAME = "image"
    CHUNK_SIZE = 64 * 1024

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{self.UPLOAD_PATH}"
        self._timeout = timeout_seconds
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def upload(
        self,
        file: UploadFile,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        encoded = self._client.build_request(
            "POST",
            self._url,
            files={self.FIELD_NAME: (file.name, file.content, file.mime_type)},
        )
        body = encoded.read()
        headers = {
            "Content-Type": encoded.headers["Content-Type"],
            "Content-Length": str(len(body)),
        }

        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self._url,
                    content=self._stream(body, on_progress),
                    headers=headers,
                ),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise UploadTimeoutError(
                f"Upload timed out after {self._timeout:g} seconds"
            ) from exc
        except httpx.HTTPError as exc:
            raise UploadNetworkError("Network error during upload") from exc

        payload = self._json(response)
        if not response.is_success:
            message = payload.get("message")
            raise UploadRejectedError(
                str(message) if message else f"Upload failed: {response.status_code}",
                status_code=response.status_code,
            )
        url = payload.get("url")
        if not url:
            raise UploadRejectedError("Upload response did not include a URL")
        return str(url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _stream(
        self,
        body: bytes,
        on_progress: ProgressCallback | None,
    ) -> AsyncIterator[bytes]:
        total = len(body)
        sent = 0
        for start in range(0, total, self.CHUNK_SIZE):
            chunk = body[start : start + self.CHUNK_SIZE]
            yield chunk
            sent += len(chunk)
            if on_progress is not None:
                on_progress(round(sent * 100 / total))

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, object]:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
