from abc import ABC, abstractmethod

from editorsync.drafts.models import DraftSnapshot


class BaseDraftStore(ABC):
    """Contract for local durable fallbacks of unsaved editor content."""

    @abstractmethod
    def write(self, document_id: int, content: str) -> DraftSnapshot:
        """Persist content for a document, replacing any earlier backup.

        Raises:
            DraftStoreError: if the backup cannot be written.
        """

    @abstractmethod
    def read(self, document_id: int) -> DraftSnapshot | None:
        """Return the latest backup, or None when there is none.

        Raises:
            DraftStoreError: if a backup exists but cannot be read.
        """

    @abstractmethod
    def clear(self, document_id: int) -> None:
        """Remove the backup for a document if present."""
