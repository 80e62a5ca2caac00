import os
from collections.abc import Generator

import pytest

from editorsync.config.settings import Settings
from editorsync.database.connection import close_pool, get_connection, init_pool
from editorsync.database.repositories.draft_repository import DraftRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "editorsync_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        DraftRepository().ensure_table()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def draft_cleanup(integration_pool: None) -> Generator[list[int], None, None]:
    cleanup: list[int] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for document_id in cleanup:
                cur.execute("DELETE FROM draft_backups WHERE document_id = %s", (document_id,))
        conn.commit()
