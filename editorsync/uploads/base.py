from abc import ABC, abstractmethod
from collections.abc import Callable

from editorsync.uploads.models import UploadFile

ProgressCallback = Callable[[int], None]


class BaseImageCompressor(ABC):
    """Contract for image compression adapters."""

    @abstractmethod
    async def compress(self, file: UploadFile) -> UploadFile:
        """Return a (possibly) smaller copy of the file with the same MIME type.

        Raises:
            CompressionError: if the image cannot be processed.
        """


class BaseImageUploader(ABC):
    """Contract for adapters that transmit a file and return its public URL."""

    @abstractmethod
    async def upload(
        self,
        file: UploadFile,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Upload the file and return the URL of the stored asset.

        Raises:
            UploadTimeoutError: if the upload exceeds its timeout.
            UploadNetworkError: on transport failures.
            UploadRejectedError: if the server answers with an error status.
        """
