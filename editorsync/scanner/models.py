from dataclasses import dataclass, field
from enum import Enum


class ProbeOutcome(str, Enum):
    """Non-numeric probe outcomes. Broken URLs carry their HTTP status instead."""

    TIMEOUT = "timeout"
    UNVERIFIABLE = "unverifiable"


ScanOutcome = int | ProbeOutcome


@dataclass(frozen=True)
class ScanDocument:
    """A document whose referenced resources should be checked."""

    id: int
    label: str
    reference_urls: tuple[str | None, ...] = ()
    markup: str | None = None


@dataclass
class UrlReferences:
    """Distinct documents referencing one URL, as parallel lists."""

    ids: list[int] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)

    def add(self, document_id: int, label: str) -> None:
        if document_id in self.ids:
            return
        self.ids.append(document_id)
        self.labels.append(label)


@dataclass(frozen=True)
class ProbeResponse:
    """What a probe could observe about a URL.

    An opaque response reached the server but its status could not be read.
    Probers that follow redirects and read the final status never set it.
    """

    status_code: int
    opaque: bool = False


@dataclass(frozen=True)
class ScanResult:
    """An unhealthy URL and every document that references it."""

    url: str
    outcome: ScanOutcome
    referencing_ids: list[int]
    referencing_labels: list[str]


@dataclass(frozen=True)
class ScanProgress:
    checked: int = 0
    total: int = 0
