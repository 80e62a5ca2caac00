from dataclasses import dataclass


def draft_key(document_id: int) -> str:
    """Storage key for a document's local backup."""
    return f"draft-backup-{document_id}"


@dataclass(frozen=True)
class DraftSnapshot:
    """Content captured right before a save attempt."""

    document_id: int
    content: str
    timestamp: float
