"""Sequential image upload queue.

Tasks are compressed and uploaded one at a time in insertion order. A failed
task stays in the queue with its error and can be retried on its own while the
main loop keeps working on other tasks.
"""

import asyncio
import itertools
from collections.abc import Callable, Iterable, Sequence

import httpx

from editorsync.config.settings import Settings
from editorsync.logging.logger import Log
from editorsync.uploads.base import BaseImageCompressor, BaseImageUploader
from editorsync.uploads.exceptions import UploadError
from editorsync.uploads.models import ACTIVE_STATUSES, UploadFile, UploadStatus, UploadTask
from editorsync.uploads.pillow_compressor import PillowImageCompressor
from editorsync.uploads.upload_client import ImageUploadClient
from editorsync.uploads.validation import is_valid_image_type


def counter_id_factory(prefix: str = "upload") -> Callable[[], str]:
    """Monotonic task ids scoped to one queue."""
    counter = itertools.count(1)
    return lambda: f"{prefix}-{next(counter)}"


class UploadQueue:
    """Owns upload tasks and runs them compress -> upload, one at a time."""

    def __init__(
        self,
        *,
        compressor: BaseImageCompressor,
        uploader: BaseImageUploader,
        on_upload_complete: Callable[[str, str], None] | None = None,
        on_task_update: Callable[[UploadTask], None] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._compressor = compressor
        self._uploader = uploader
        self._on_upload_complete = on_upload_complete
        self._on_task_update = on_task_update
        self._id_factory = id_factory or counter_id_factory()
        self._tasks: list[UploadTask] = []
        self._processing = False
        self._retrying: set[str] = set()

    @property
    def queue(self) -> tuple[UploadTask, ...]:
        return tuple(self._tasks)

    @property
    def is_uploading(self) -> bool:
        return any(task.status in ACTIVE_STATUSES for task in self._tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self._tasks if task.status is UploadStatus.SUCCESS)

    @property
    def failed_count(self) -> int:
        return sum(1 for task in self._tasks if task.status is UploadStatus.FAILED)

    @property
    def total_count(self) -> int:
        return len(self._tasks)

    @property
    def status_message(self) -> str:
        """Human-readable progress, derived from task state on every read."""
        total = self.total_count
        for position, task in enumerate(self._tasks, start=1):
            if task.status in ACTIVE_STATUSES:
                return f"Uploading {position} of {total} images..."
        if total == 0:
            return ""
        pending = total - self.completed_count - self.failed_count
        if pending:
            return f"{pending} of {total} images waiting to upload"
        if self.failed_count:
            return f"{self.completed_count} of {total} images uploaded, {self.failed_count} failed"
        return f"All {total} images uploaded"

    def get(self, task_id: str) -> UploadTask | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def add_to_queue(
        self,
        files: Iterable[UploadFile],
        alt_texts: Sequence[str] = (),
    ) -> list[UploadTask]:
        """Append valid images as pending tasks. Does not start processing.

        Alt texts are matched to files by position in the submitted list,
        before invalid files are dropped.
        """
        added: list[UploadTask] = []
        for index, file in enumerate(files):
            if not is_valid_image_type(file):
                Log.warning(f"Skipping {file.name}: unsupported type '{file.mime_type}'")
                continue
            alt_text = alt_texts[index] if index < len(alt_texts) else ""
            added.append(UploadTask(id=self._id_factory(), file=file, alt_text=alt_text or ""))
        self._tasks.extend(added)
        return added

    async def process_queue(self) -> None:
        """Run every pending task in order. No-op while a run is active."""
        if self._processing:
            return
        self._processing = True
        try:
            pending = [
                task
                for task in self._tasks
                if task.status is UploadStatus.PENDING and task.id not in self._retrying
            ]
            for index, task in enumerate(pending, start=1):
                if not self._is_runnable(task):
                    continue
                Log.info(f"Uploading {index} of {len(pending)} images")
                await self._run_task(task)
            if pending:
                Log.info(f"All {len(pending)} images processed")
        finally:
            self._processing = False

    async def retry_upload(self, task_id: str) -> None:
        """Re-run a failed task by itself."""
        task = self.get(task_id)
        if task is None or task.status is not UploadStatus.FAILED:
            return
        if task_id in self._retrying:
            return
        self._retrying.add(task_id)
        try:
            self._update(task, status=UploadStatus.PENDING, progress=0, error=None)
            await self._run_task(task)
        finally:
            self._retrying.discard(task_id)

    def remove_from_queue(self, task_id: str) -> None:
        self._tasks = [task for task in self._tasks if task.id != task_id]

    def clear_completed(self) -> None:
        self._tasks = [task for task in self._tasks if task.status is not UploadStatus.SUCCESS]

    def _is_runnable(self, task: UploadTask) -> bool:
        return (
            task.status is UploadStatus.PENDING
            and task.id not in self._retrying
            and task in self._tasks
        )

    async def _run_task(self, task: UploadTask) -> str | None:
        self._update(task, status=UploadStatus.COMPRESSING, progress=0)
        try:
            compressed = await self._compressor.compress(task.file)
        except asyncio.CancelledError:
            self._update(task, status=UploadStatus.PENDING, progress=0)
            raise
        except Exception as exc:
            self._fail(task, f"Compression failed: {exc}")
            return None

        self._update(task, status=UploadStatus.UPLOADING, progress=0)
        try:
            url = await self._uploader.upload(
                compressed,
                on_progress=lambda percent: self._update(task, progress=percent),
            )
        except asyncio.CancelledError:
            self._update(task, status=UploadStatus.PENDING, progress=0)
            raise
        except UploadError as exc:
            self._fail(task, str(exc))
            return None
        except Exception as exc:
            Log.exception(f"Unexpected error uploading {task.file.name}")
            self._fail(task, f"Upload failed: {exc}")
            return None

        self._update(task, status=UploadStatus.SUCCESS, progress=100, result_url=url)
        Log.info(f"Uploaded {task.file.name} to {url}")
        if self._on_upload_complete is not None:
            self._on_upload_complete(url, task.alt_text)
        return url

    def _fail(self, task: UploadTask, message: str) -> None:
        Log.error(f"Upload task {task.id} ({task.file.name}) failed: {message}")
        self._update(task, status=UploadStatus.FAILED, progress=0, error=message)

    def _update(self, task: UploadTask, **changes: object) -> None:
        for name, value in changes.items():
            setattr(task, name, value)
        if self._on_task_update is not None:
            self._on_task_update(task)


def build_upload_queue(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    on_upload_complete: Callable[[str, str], None] | None = None,
    on_task_update: Callable[[UploadTask], None] | None = None,
) -> UploadQueue:
    """Build an UploadQueue with the Pillow compressor and httpx uploader."""
    compressor = PillowImageCompressor(
        max_width=settings.upload_max_width,
        max_size_mb=settings.upload_max_size_mb,
    )
    uploader = ImageUploadClient(
        base_url=settings.api_base_url,
        timeout_seconds=settings.upload_timeout_seconds,
        client=client,
    )
    return UploadQueue(
        compressor=compressor,
        uploader=uploader,
        on_upload_complete=on_upload_complete,
        on_task_update=on_task_update,
    )
