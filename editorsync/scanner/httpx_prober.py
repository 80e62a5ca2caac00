import httpx

from editorsync.scanner.base import BaseProber
from editorsync.scanner.exceptions import ProbeError, ProbeTimeoutError
from editorsync.scanner.models import ProbeResponse


class HttpxProber(BaseProber):
    """HEAD probe over httpx.

    Redirects are followed and the final response is reported, so an image
    moved behind a redirect to a missing target still shows up as broken.
    httpx can always read the status, so responses are never opaque.
    """

    MAX_REDIRECTS = 5

    def __init__(
        self,
        *,
        timeout_seconds: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._client = client or httpx.AsyncClient(
            timeout=timeout_seconds, max_redirects=self.MAX_REDIRECTS
        )

    async def head(self, url: str) -> ProbeResponse:
        try:
            response = await self._client.head(
                url, timeout=self._timeout, follow_redirects=True
            )
        except httpx.TimeoutException as exc:
            raise ProbeTimeoutError(f"HEAD {url} timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ProbeError(f"HEAD {url} failed: {exc}") from exc

        return ProbeResponse(status_code=response.status_code)

    async def aclose(self) -> None:
        await self._client.aclose()
