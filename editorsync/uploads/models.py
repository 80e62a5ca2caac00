from dataclasses import dataclass
from enum import Enum


class UploadStatus(str, Enum):
    PENDING = "pending"
    COMPRESSING = "compressing"
    UPLOADING = "uploading"
    SUCCESS = "success"
    FAILED = "failed"


ACTIVE_STATUSES = frozenset({UploadStatus.COMPRESSING, UploadStatus.UPLOADING})


@dataclass(frozen=True)
class UploadFile:
    """Binary payload with the metadata the upload endpoint needs."""

    name: str
    content: bytes
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(eq=False)
class UploadTask:
    """One file moving through compress -> upload. Mutated in place."""

    id: str
    file: UploadFile
    alt_text: str = ""
    status: UploadStatus = UploadStatus.PENDING
    progress: int = 0
    result_url: str | None = None
    error: str | None = None
