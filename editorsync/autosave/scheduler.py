"""Auto-save scheduling for a single editable document.

Saves are triggered by whichever fires first: a trailing debounce timer that
restarts on every edit, or a max-wait deadline armed by the first edit of a
burst. The result of each save is classified into a SaveStatus:

- StaleEdit stops scheduling for the rest of the session.
- Unauthorized stops scheduling until a manual save succeeds.
- TooLarge drops pending timers; the next edit re-arms them.
- Network and internal failures keep timers and dirty state, so the pending
  deadline or the next edit retries.

Timers that fire while a save is in flight are skipped. Once the request
resolves, any edit made during it re-arms the timers unless the result halts
scheduling.
"""

import asyncio
from collections.abc import Awaitable, Callable

import httpx

from editorsync.autosave.models import SaveErrorKind, SaveResult, SaveStatus, SaveTask
from editorsync.autosave.save_client import SaveDraftClient
from editorsync.config.settings import Settings
from editorsync.drafts.base import BaseDraftStore
from editorsync.drafts.exceptions import DraftStoreError
from editorsync.drafts.factory import DraftStoreFactory
from editorsync.logging.logger import Log
from editorsync.timers.timer_controller import TimerController

SaveFn = Callable[[str, int], Awaitable[SaveResult]]
StatusCallback = Callable[[SaveStatus, str | None], None]

_HALTING_STATUSES = frozenset({SaveStatus.STALE, SaveStatus.UNAUTHORIZED})


class SaveScheduler:
    """Decides when to save one document and reports save status."""

    def __init__(
        self,
        *,
        document_id: int | None,
        expected_version: int,
        get_content: Callable[[], str],
        save_fn: SaveFn,
        draft_store: BaseDraftStore | None = None,
        on_save_success: Callable[[int], None] | None = None,
        on_status_change: StatusCallback | None = None,
        debounce_seconds: float = 60.0,
        max_wait_seconds: float = 300.0,
        save_timeout_seconds: float = 30.0,
        enabled: bool = True,
        timers: TimerController | None = None,
    ) -> None:
        self._document_id = document_id
        self._expected_version = expected_version
        self._get_content = get_content
        self._save_fn = save_fn
        self._draft_store = draft_store
        self._on_save_success = on_save_success
        self._on_status_change = on_status_change
        self._debounce_seconds = debounce_seconds
        self._max_wait_seconds = max_wait_seconds
        self._save_timeout_seconds = save_timeout_seconds
        self._enabled = enabled
        self._timers = timers or TimerController()

        self._dirty = False
        self._status = SaveStatus.IDLE
        self._last_saved_version: int | None = None
        self._edit_revision = 0
        self._saving = False
        self._disposed = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def status(self) -> SaveStatus:
        return self._status

    @property
    def document_id(self) -> int | None:
        return self._document_id

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def expected_version(self) -> int:
        return self._expected_version

    @property
    def last_saved_version(self) -> int | None:
        return self._last_saved_version

    @property
    def task(self) -> SaveTask:
        return SaveTask(
            document_id=self._document_id,
            expected_version=self._expected_version,
            dirty=self._dirty,
            status=self._status,
            last_saved_version=self._last_saved_version,
        )

    def mark_dirty(self) -> None:
        """Record an edit and (re)arm the save timers."""
        if self._disposed:
            return
        self._dirty = True
        self._edit_revision += 1
        self._schedule()

    async def trigger_save(self) -> None:
        """Save immediately, bypassing timers."""
        if self._disposed or self._document_id is None:
            return
        if self._status is SaveStatus.STALE:
            return
        await self._save(manual=True)

    def reset(self, document_id: int | None, expected_version: int) -> None:
        """Start over after an external reload of the document."""
        self._timers.cancel_all()
        self._document_id = document_id
        self._expected_version = expected_version
        self._dirty = False
        self._set_status(SaveStatus.IDLE)

    def dispose(self) -> None:
        """Tear down: cancel timers and any save still in flight."""
        self._disposed = True
        self._timers.cancel_all()
        for task in list(self._tasks):
            task.cancel()

    def _schedule(self) -> None:
        if self._disposed or not self._enabled or self._document_id is None:
            return
        if self._status in _HALTING_STATUSES:
            return
        self._timers.arm_debounce(self._debounce_seconds, self._on_timer_fired)
        self._timers.arm_max_wait(self._max_wait_seconds, self._on_timer_fired)

    def _on_timer_fired(self) -> None:
        task = asyncio.get_running_loop().create_task(self._save(manual=False))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _save(self, *, manual: bool) -> None:
        if not self._dirty or self._saving or self._document_id is None:
            return
        if not manual and self._status in _HALTING_STATUSES:
            return

        document_id = self._document_id
        revision = self._edit_revision
        self._saving = True
        self._set_status(SaveStatus.SAVING)
        try:
            content = self._get_content()
            await self._backup(document_id, content)
            result = await self._call_save(document_id, content)
        except Exception:
            Log.exception(f"Could not prepare save for document {document_id}")
            result = SaveResult.failed(SaveErrorKind.INTERNAL_ERROR, "Save failed")
        finally:
            self._saving = False
        self._apply_result(result, revision)

    async def _call_save(self, document_id: int, content: str) -> SaveResult:
        try:
            return await asyncio.wait_for(
                self._save_fn(content, self._expected_version),
                timeout=self._save_timeout_seconds,
            )
        except asyncio.TimeoutError:
            Log.warning(
                f"Save for document {document_id} timed out after "
                f"{self._save_timeout_seconds:g} seconds"
            )
            return SaveResult.failed(SaveErrorKind.NETWORK_ERROR, "Save timed out")
        except Exception as exc:
            Log.error(f"Save for document {document_id} raised: {exc}")
            return SaveResult.failed(SaveErrorKind.NETWORK_ERROR, "Save failed")

    async def _backup(self, document_id: int, content: str) -> None:
        if self._draft_store is None:
            return
        # stores may block (psycopg), keep them off the event loop
        try:
            await asyncio.to_thread(self._draft_store.write, document_id, content)
        except DraftStoreError as exc:
            Log.warning(f"Draft backup skipped for document {document_id}: {exc}")
        except Exception:
            Log.exception(f"Draft backup failed for document {document_id}")

    def _apply_result(self, result: SaveResult, revision: int) -> None:
        if result.success and result.new_version is not None:
            self._on_success(result.new_version, revision)
            return

        kind = result.kind or SaveErrorKind.INTERNAL_ERROR
        message = result.message
        Log.warning(f"Save for document {self._document_id} failed: {kind.value}: {message}")
        if kind is SaveErrorKind.STALE_EDIT:
            self._timers.cancel_all()
            self._set_status(SaveStatus.STALE, message)
        elif kind is SaveErrorKind.UNAUTHORIZED:
            self._timers.cancel_all()
            self._set_status(SaveStatus.UNAUTHORIZED, message)
        elif kind is SaveErrorKind.TOO_LARGE:
            self._timers.cancel_all()
            self._reschedule_if_edited(revision)
            self._set_status(SaveStatus.ERROR, message or "Content is too large")
        else:
            self._reschedule_if_edited(revision)
            self._set_status(SaveStatus.ERROR, message or "Save failed")

    def _reschedule_if_edited(self, revision: int) -> None:
        # timers that fired during the flight were dropped by the saving guard
        if revision != self._edit_revision:
            self._schedule()

    def _on_success(self, new_version: int, revision: int) -> None:
        self._expected_version = new_version
        self._last_saved_version = new_version
        self._timers.cancel_all()
        if revision == self._edit_revision:
            self._dirty = False
        else:
            # edits arrived while the request was in flight
            self._schedule()
        Log.info(f"Saved document {self._document_id} at version {new_version}")
        if self._on_save_success is not None and not self._disposed:
            self._on_save_success(new_version)
        self._set_status(SaveStatus.SAVED)

    def _set_status(self, status: SaveStatus, message: str | None = None) -> None:
        self._status = status
        if self._on_status_change is not None and not self._disposed:
            self._on_status_change(status, message)


def build_save_scheduler(
    settings: Settings,
    *,
    document_id: int | None,
    expected_version: int,
    get_content: Callable[[], str],
    on_save_success: Callable[[int], None] | None = None,
    on_status_change: StatusCallback | None = None,
    client: httpx.AsyncClient | None = None,
) -> SaveScheduler:
    """Build a SaveScheduler that saves through the draft endpoint."""
    save_client = SaveDraftClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.save_timeout_seconds,
        client=client,
    )

    async def save_fn(content: str, version: int) -> SaveResult:
        current_id = scheduler.document_id
        if current_id is None:
            return SaveResult.failed(SaveErrorKind.INTERNAL_ERROR, "Document has no id")
        return await save_client.save(current_id, content, version)

    scheduler = SaveScheduler(
        document_id=document_id,
        expected_version=expected_version,
        get_content=get_content,
        save_fn=save_fn,
        draft_store=DraftStoreFactory.create(settings),
        on_save_success=on_save_success,
        on_status_change=on_status_change,
        debounce_seconds=settings.autosave_debounce_seconds,
        max_wait_seconds=settings.autosave_max_wait_seconds,
        save_timeout_seconds=settings.save_timeout_seconds,
    )
    return scheduler
