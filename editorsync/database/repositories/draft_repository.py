import psycopg
from psycopg.rows import dict_row

from editorsync.database.connection import get_connection
from editorsync.database.models import DraftRecord
from editorsync.drafts.exceptions import DraftStoreError

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS draft_backups (
    document_id BIGINT PRIMARY KEY,
    content TEXT NOT NULL,
    saved_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""


class DraftRepository:
    """Database operations for the draft_backups table."""

    def ensure_table(self) -> None:
        """Create the draft_backups table if it does not exist yet."""
        with get_connection() as conn:
            conn.execute(CREATE_TABLE_SQL)
            conn.commit()

    def upsert(self, document_id: int, content: str) -> DraftRecord:
        """Insert or replace the backup for a document."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO draft_backups (document_id, content, saved_at)
                        VALUES (%s, %s, NOW())
                        ON CONFLICT (document_id)
                        DO UPDATE SET content = EXCLUDED.content, saved_at = NOW()
                        RETURNING document_id, content, saved_at
                        """,
                        (document_id, content),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.Error as exc:
            raise DraftStoreError(
                f"Failed to write draft backup for document {document_id}: {exc}"
            ) from exc

        if row is None:
            raise DraftStoreError(f"Upsert returned no row for document {document_id}")
        return DraftRecord(
            document_id=row["document_id"],
            content=row["content"],
            saved_at=row["saved_at"],
        )

    def find_by_document_id(self, document_id: int) -> DraftRecord | None:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        SELECT document_id, content, saved_at
                        FROM draft_backups
                        WHERE document_id = %s
                        """,
                        (document_id,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise DraftStoreError(
                f"Failed to read draft backup for document {document_id}: {exc}"
            ) from exc

        if row is None:
            return None
        return DraftRecord(
            document_id=row["document_id"],
            content=row["content"],
            saved_at=row["saved_at"],
        )

    def delete(self, document_id: int) -> None:
        try:
            with get_connection() as conn:
                conn.execute(
                    "DELETE FROM draft_backups WHERE document_id = %s",
                    (document_id,),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise DraftStoreError(
                f"Failed to delete draft backup for document {document_id}: {exc}"
            ) from exc
