from unittest.mock import MagicMock, patch

import psycopg
import pytest

from editorsync.database.repositories.draft_repository import DraftRepository
from editorsync.drafts.exceptions import DraftStoreError


def _failing_connection() -> MagicMock:
    """get_connection() stand-in whose connection fails every statement."""
    conn = MagicMock()
    conn.execute.side_effect = psycopg.OperationalError("server closed the connection")
    conn.cursor.return_value.__enter__.return_value.execute.side_effect = (
        psycopg.OperationalError("server closed the connection")
    )
    get_connection = MagicMock()
    get_connection.return_value.__enter__.return_value = conn
    return get_connection


class TestDraftRepositoryErrors:
    @pytest.mark.parametrize(
        ("method", "args"),
        [
            ("upsert", (3, "<p>x</p>")),
            ("find_by_document_id", (3,)),
            ("delete", (3,)),
        ],
    )
    def test_database_errors_become_draft_store_errors(
        self, method: str, args: tuple[object, ...]
    ) -> None:
        with patch(
            "editorsync.database.repositories.draft_repository.get_connection",
            _failing_connection(),
        ):
            with pytest.raises(DraftStoreError, match="document 3"):
                getattr(DraftRepository(), method)(*args)
