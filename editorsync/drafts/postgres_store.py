from editorsync.database.repositories.draft_repository import DraftRepository
from editorsync.drafts.base import BaseDraftStore
from editorsync.drafts.models import DraftSnapshot


class PostgresDraftStore(BaseDraftStore):
    """Keeps draft backups in the draft_backups table."""

    def __init__(self, repository: DraftRepository | None = None) -> None:
        self._repository = repository or DraftRepository()

    def write(self, document_id: int, content: str) -> DraftSnapshot:
        record = self._repository.upsert(document_id, content)
        return DraftSnapshot(
            document_id=record.document_id,
            content=record.content,
            timestamp=record.saved_at.timestamp(),
        )

    def read(self, document_id: int) -> DraftSnapshot | None:
        record = self._repository.find_by_document_id(document_id)
        if record is None:
            return None
        return DraftSnapshot(
            document_id=record.document_id,
            content=record.content,
            timestamp=record.saved_at.timestamp(),
        )

    def clear(self, document_id: int) -> None:
        self._repository.delete(document_id)
