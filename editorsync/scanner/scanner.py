"""Broken-resource scanner for a document collection.

URLs are collected from explicit reference fields and embedded markup,
deduplicated across all documents, then probed with a HEAD request under a
timeout. Outcomes:

- readable non-error status or opaque response -> healthy, not reported
- readable status >= 400                      -> broken, reported with status
- deadline exceeded                           -> "timeout"
- anything else                               -> "unverifiable"

Unverifiable URLs may be fine; they are never reported as broken. Redirects
are followed, so the outcome reflects the final target.
"""

import asyncio
from collections.abc import Callable, Iterable

import httpx

from editorsync.config.settings import Settings
from editorsync.logging.logger import Log
from editorsync.scanner.base import BaseProber
from editorsync.scanner.exceptions import ProbeError, ProbeTimeoutError
from editorsync.scanner.httpx_prober import HttpxProber
from editorsync.scanner.markup import extract_image_urls
from editorsync.scanner.models import (
    ProbeOutcome,
    ProbeResponse,
    ScanDocument,
    ScanOutcome,
    ScanProgress,
    ScanResult,
    UrlReferences,
)
from editorsync.scanner.url_map import UrlExtractor, build_url_map


def classify_response(response: ProbeResponse) -> ScanOutcome | None:
    """Return the broken status for a response, or None when healthy."""
    if response.opaque:
        return None
    if response.status_code >= 400:
        return response.status_code
    return None


class ResourceHealthScanner:
    """Probes every unique URL once and keeps live progress."""

    def __init__(
        self,
        prober: BaseProber,
        *,
        timeout_seconds: float = 10.0,
        concurrency: int = 1,
        extract_urls: UrlExtractor = extract_image_urls,
        on_progress: Callable[[ScanProgress], None] | None = None,
    ) -> None:
        self._prober = prober
        self._timeout = timeout_seconds
        self._concurrency = max(1, concurrency)
        self._extract_urls = extract_urls
        self._on_progress = on_progress
        self._scanning = False
        self._results: list[ScanResult] = []
        self._progress = ScanProgress()

    @property
    def scanning(self) -> bool:
        return self._scanning

    @property
    def results(self) -> list[ScanResult]:
        return list(self._results)

    @property
    def progress(self) -> ScanProgress:
        return self._progress

    async def scan(self, documents: Iterable[ScanDocument]) -> list[ScanResult]:
        """Probe all referenced URLs and return the unhealthy ones."""
        if self._scanning:
            Log.warning("Scan already in progress, ignoring new request")
            return self.results

        self._scanning = True
        self._results = []
        try:
            url_map = build_url_map(documents, self._extract_urls)
            self._set_progress(ScanProgress(checked=0, total=len(url_map)))
            Log.info(f"Scanning {len(url_map)} unique URLs")

            semaphore = asyncio.Semaphore(self._concurrency)
            checked = await asyncio.gather(
                *(self._check(url, refs, semaphore) for url, refs in url_map.items())
            )
            self._results = [result for result in checked if result is not None]
        finally:
            self._scanning = False

        Log.info(
            f"Scan finished: {len(self._results)} of {self._progress.total} URLs need attention"
        )
        return self.results

    def reset(self) -> None:
        """Forget results and progress of the previous scan."""
        self._results = []
        self._set_progress(ScanProgress())

    async def _check(
        self,
        url: str,
        refs: UrlReferences,
        semaphore: asyncio.Semaphore,
    ) -> ScanResult | None:
        async with semaphore:
            outcome = await self._probe(url)
        self._set_progress(
            ScanProgress(checked=self._progress.checked + 1, total=self._progress.total)
        )
        if outcome is None:
            return None
        return ScanResult(
            url=url,
            outcome=outcome,
            referencing_ids=list(refs.ids),
            referencing_labels=list(refs.labels),
        )

    async def _probe(self, url: str) -> ScanOutcome | None:
        try:
            response = await asyncio.wait_for(self._prober.head(url), timeout=self._timeout)
        except (asyncio.TimeoutError, ProbeTimeoutError):
            Log.debug(f"Probe timed out: {url}")
            return ProbeOutcome.TIMEOUT
        except ProbeError as exc:
            Log.debug(f"Probe could not verify {url}: {exc}")
            return ProbeOutcome.UNVERIFIABLE
        except Exception as exc:
            Log.warning(f"Unexpected probe failure for {url}: {exc}")
            return ProbeOutcome.UNVERIFIABLE
        return classify_response(response)

    def _set_progress(self, progress: ScanProgress) -> None:
        self._progress = progress
        if self._on_progress is not None:
            self._on_progress(progress)


def build_scanner(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    on_progress: Callable[[ScanProgress], None] | None = None,
) -> ResourceHealthScanner:
    """Build a scanner with the httpx prober."""
    prober = HttpxProber(timeout_seconds=settings.scan_timeout_seconds, client=client)
    return ResourceHealthScanner(
        prober,
        timeout_seconds=settings.scan_timeout_seconds,
        concurrency=settings.scan_concurrency,
        on_progress=on_progress,
    )
