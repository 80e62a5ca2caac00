import argparse
import asyncio
import json
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx

from editorsync.config.settings import Settings
from editorsync.database.connection import close_pool, init_pool
from editorsync.database.repositories.draft_repository import DraftRepository
from editorsync.drafts.factory import DraftStoreFactory
from editorsync.drafts.recovery import check_for_recovery
from editorsync.logging.logger import Log
from editorsync.scanner.models import ScanDocument
from editorsync.scanner.scanner import build_scanner
from editorsync.uploads.models import UploadFile, UploadStatus
from editorsync.uploads.queue import build_upload_queue


def load_documents(path: Path) -> list[ScanDocument]:
    """Read a JSON list of posts: id, title, body, featured/og image URLs."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a JSON list of documents")
    documents = []
    for item in raw:
        documents.append(
            ScanDocument(
                id=int(item["id"]),
                label=str(item.get("title") or item.get("label") or item["id"]),
                reference_urls=(item.get("featured_image_url"), item.get("og_image_url")),
                markup=item.get("body"),
            )
        )
    return documents


def load_upload_file(path: Path) -> UploadFile:
    mime_type, _ = mimetypes.guess_type(path.name)
    return UploadFile(
        name=path.name,
        content=path.read_bytes(),
        mime_type=mime_type or "application/octet-stream",
    )


async def run_scan(settings: Settings, documents_path: Path) -> int:
    documents = load_documents(documents_path)
    async with httpx.AsyncClient(timeout=settings.scan_timeout_seconds) as client:
        scanner = build_scanner(settings, client=client)
        results = await scanner.scan(documents)

    for result in results:
        Log.warning(
            f"{result.url}: {getattr(result.outcome, 'value', result.outcome)} "
            f"(referenced by {', '.join(result.referencing_labels)})"
        )
    Log.info(f"Checked {scanner.progress.checked} URLs, {len(results)} flagged")
    return 1 if results else 0


async def run_upload(
    settings: Settings,
    paths: Sequence[Path],
    alt_texts: Sequence[str],
) -> int:
    files = [load_upload_file(path) for path in paths]

    def on_complete(url: str, alt_text: str) -> None:
        print(f"{url}\t{alt_text}")

    async with httpx.AsyncClient(timeout=settings.upload_timeout_seconds) as client:
        queue = build_upload_queue(settings, client=client, on_upload_complete=on_complete)
        queue.add_to_queue(files, alt_texts)
        await queue.process_queue()

    for task in queue.queue:
        if task.status is UploadStatus.FAILED:
            Log.error(f"{task.file.name}: {task.error}")
    Log.info(queue.status_message)
    return 1 if queue.failed_count else 0


def run_recover(
    settings: Settings,
    document_id: int,
    server_updated_at: float,
    clear: bool = False,
) -> int:
    """Print a local backup that is newer than the server copy."""
    store = DraftStoreFactory.create(settings)
    snapshot = check_for_recovery(
        store,
        document_id,
        server_updated_at,
        tolerance_seconds=settings.recovery_tolerance_seconds,
    )
    if snapshot is None:
        Log.info(f"No newer local backup for document {document_id}")
        return 0

    Log.info(f"Found backup for document {document_id} from {snapshot.timestamp:.0f}")
    print(snapshot.content)
    if clear:
        store.clear(document_id)
    return 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="editorsync")
    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="Check referenced images for broken links")
    scan.add_argument("documents", type=Path, help="JSON file with a list of posts")

    upload = commands.add_parser("upload", help="Compress and upload images in order")
    upload.add_argument("files", type=Path, nargs="+")
    upload.add_argument("--alt", dest="alt_texts", action="append", default=[])

    recover = commands.add_parser("recover", help="Print a newer local draft backup")
    recover.add_argument("document_id", type=int)
    recover.add_argument(
        "--server-updated-at",
        type=float,
        required=True,
        help="Server modification time of the document, epoch seconds",
    )
    recover.add_argument("--clear", action="store_true", help="Remove the backup afterwards")

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> run the command."""
    args = parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if args.command == "scan":
        return asyncio.run(run_scan(settings, args.documents))
    if args.command == "upload":
        return asyncio.run(run_upload(settings, args.files, args.alt_texts))

    uses_database = settings.draft_store.lower() == "postgres"
    if uses_database:
        init_pool(settings)
    try:
        if uses_database:
            DraftRepository().ensure_table()
        return run_recover(settings, args.document_id, args.server_updated_at, args.clear)
    finally:
        if uses_database:
            close_pool()


if __name__ == "__main__":
    sys.exit(main())
