import json
import time
from pathlib import Path

from editorsync.drafts.base import BaseDraftStore
from editorsync.drafts.exceptions import DraftStoreError
from editorsync.drafts.models import DraftSnapshot, draft_key


class FileDraftStore(BaseDraftStore):
    """Stores each backup as {content, timestamp} JSON in a directory."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def write(self, document_id: int, content: str) -> DraftSnapshot:
        snapshot = DraftSnapshot(
            document_id=document_id, content=content, timestamp=time.time()
        )
        path = self._path(document_id)
        payload = json.dumps({"content": content, "timestamp": snapshot.timestamp})
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            raise DraftStoreError(f"Failed to write draft backup {path}: {exc}") from exc
        return snapshot

    def read(self, document_id: int) -> DraftSnapshot | None:
        path = self._path(document_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return DraftSnapshot(
                document_id=document_id,
                content=str(data["content"]),
                timestamp=float(data["timestamp"]),
            )
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise DraftStoreError(f"Failed to read draft backup {path}: {exc}") from exc

    def clear(self, document_id: int) -> None:
        self._path(document_id).unlink(missing_ok=True)

    def _path(self, document_id: int) -> Path:
        return self._root / f"{draft_key(document_id)}.json"
