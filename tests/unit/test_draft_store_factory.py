from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from editorsync.database.models import DraftRecord
from editorsync.drafts.factory import DraftStoreFactory
from editorsync.drafts.file_store import FileDraftStore
from editorsync.drafts.postgres_store import PostgresDraftStore


class TestDraftStoreFactory:
    def test_creates_file_store(self, tmp_path: Path) -> None:
        settings = MagicMock(draft_store="file", draft_dir=str(tmp_path))

        store = DraftStoreFactory.create(settings)

        assert isinstance(store, FileDraftStore)

    def test_store_name_is_case_insensitive(self) -> None:
        settings = MagicMock(draft_store="Postgres")

        store = DraftStoreFactory.create(settings)

        assert isinstance(store, PostgresDraftStore)

    def test_unknown_store_raises(self) -> None:
        settings = MagicMock(draft_store="redis")

        with pytest.raises(ValueError, match="Unknown draft store 'redis'"):
            DraftStoreFactory.create(settings)


class TestPostgresDraftStore:
    def test_write_maps_record_to_snapshot(self) -> None:
        saved_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
        repo = MagicMock()
        repo.upsert.return_value = DraftRecord(document_id=4, content="body", saved_at=saved_at)

        snapshot = PostgresDraftStore(repo).write(4, "body")

        repo.upsert.assert_called_once_with(4, "body")
        assert snapshot.content == "body"
        assert snapshot.timestamp == saved_at.timestamp()

    def test_read_missing_returns_none(self) -> None:
        repo = MagicMock()
        repo.find_by_document_id.return_value = None

        assert PostgresDraftStore(repo).read(4) is None

    def test_clear_deletes_row(self) -> None:
        repo = MagicMock()

        PostgresDraftStore(repo).clear(4)

        repo.delete.assert_called_once_with(4)
