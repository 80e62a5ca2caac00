from pathlib import Path

from editorsync.config.settings import Settings
from editorsync.drafts.base import BaseDraftStore
from editorsync.drafts.file_store import FileDraftStore
from editorsync.drafts.postgres_store import PostgresDraftStore


class DraftStoreFactory:
    """Creates the draft backup store selected in settings."""

    STORES = ("file", "postgres")

    @classmethod
    def create(cls, settings: Settings) -> BaseDraftStore:
        store = settings.draft_store.lower()
        if store == "file":
            return FileDraftStore(Path(settings.draft_dir))
        if store == "postgres":
            return PostgresDraftStore()
        raise ValueError(
            f"Unknown draft store '{store}'. Choose from: {list(cls.STORES)}"
        )
