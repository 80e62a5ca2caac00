class UploadError(Exception):
    """Base exception for all upload-related errors."""


class CompressionError(UploadError):
    """Raised when an image cannot be decoded or re-encoded."""


class UploadTimeoutError(UploadError):
    """Raised when an upload does not finish within its timeout."""


class UploadNetworkError(UploadError):
    """Raised when the upload request fails below the HTTP layer."""


class UploadRejectedError(UploadError):
    """Raised when the upload endpoint answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
