"""Crash recovery for editor content backed up before each save."""

from editorsync.drafts.base import BaseDraftStore
from editorsync.drafts.exceptions import DraftStoreError
from editorsync.drafts.models import DraftSnapshot
from editorsync.logging.logger import Log

RECOVERY_TOLERANCE_SECONDS = 5.0


def check_for_recovery(
    store: BaseDraftStore,
    document_id: int,
    server_updated_at: float,
    tolerance_seconds: float = RECOVERY_TOLERANCE_SECONDS,
) -> DraftSnapshot | None:
    """Return the local backup if it is newer than the server copy.

    Args:
        store: Where backups were written.
        document_id: The document being opened.
        server_updated_at: Server modification time, epoch seconds.
        tolerance_seconds: Backups within this window of the server time are
            treated as the same version and not offered.

    Returns:
        The snapshot to offer for recovery, or None.
    """
    try:
        snapshot = store.read(document_id)
    except DraftStoreError as exc:
        Log.warning(f"Ignoring unreadable backup for document {document_id}: {exc}")
        return None
    if snapshot is None or not snapshot.content:
        return None
    if snapshot.timestamp - server_updated_at > tolerance_seconds:
        return snapshot
    return None
