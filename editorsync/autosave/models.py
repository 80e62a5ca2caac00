from dataclasses import dataclass
from enum import Enum


class SaveStatus(str, Enum):
    """Status shown by save indicators."""

    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"
    STALE = "stale"
    UNAUTHORIZED = "unauthorized"


class SaveErrorKind(str, Enum):
    """Failure kinds returned by the save endpoint."""

    STALE_EDIT = "StaleEdit"
    UNAUTHORIZED = "Unauthorized"
    TOO_LARGE = "TooLarge"
    NETWORK_ERROR = "NetworkError"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class SaveResult:
    """Outcome of one call to the save endpoint."""

    success: bool
    new_version: int | None = None
    kind: SaveErrorKind | None = None
    message: str | None = None

    @classmethod
    def ok(cls, new_version: int) -> "SaveResult":
        return cls(success=True, new_version=new_version)

    @classmethod
    def failed(cls, kind: SaveErrorKind, message: str | None = None) -> "SaveResult":
        return cls(success=False, kind=kind, message=message)


@dataclass(frozen=True)
class SaveTask:
    """Snapshot of the auto-save state for one editable document."""

    document_id: int | None
    expected_version: int
    dirty: bool
    status: SaveStatus
    last_saved_version: int | None = None
