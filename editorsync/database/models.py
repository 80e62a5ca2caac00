from dataclasses import dataclass
from datetime import datetime


@dataclass
class DraftRecord:
    """Represents a row from the draft_backups table."""

    document_id: int
    content: str
    saved_at: datetime
