from collections.abc import Callable

import httpx
import pytest

from editorsync.scanner.exceptions import ProbeError, ProbeTimeoutError
from editorsync.scanner.httpx_prober import HttpxProber

pytestmark = pytest.mark.asyncio


def _make_prober(handler: Callable[[httpx.Request], httpx.Response]) -> HttpxProber:
    return HttpxProber(
        timeout_seconds=5,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestHead:
    async def test_sends_head_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        response = await _make_prober(handler).head("https://cdn.test/a.png")

        assert seen[0].method == "HEAD"
        assert response.status_code == 200
        assert not response.opaque

    async def test_error_status_is_readable(self) -> None:
        response = await _make_prober(lambda request: httpx.Response(404)).head(
            "https://cdn.test/missing.png"
        )

        assert response.status_code == 404
        assert not response.opaque

    async def test_redirect_to_missing_target_reports_final_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.scheme == "http":
                return httpx.Response(
                    301, headers={"Location": str(request.url.copy_with(scheme="https"))}
                )
            return httpx.Response(404)

        response = await _make_prober(handler).head("http://cdn.test/a.png")

        assert response.status_code == 404
        assert not response.opaque

    async def test_redirect_to_live_target_is_healthy(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old.png":
                return httpx.Response(302, headers={"Location": "/new.png"})
            return httpx.Response(200)

        response = await _make_prober(handler).head("https://cdn.test/old.png")

        assert response.status_code == 200

    async def test_redirect_loop_is_unverifiable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(302, headers={"Location": str(request.url)})

        with pytest.raises(ProbeError):
            await _make_prober(handler).head("https://cdn.test/loop.png")

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProbeTimeoutError):
            await _make_prober(handler).head("https://cdn.test/slow.png")

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("name resolution failed", request=request)

        with pytest.raises(ProbeError, match="https://gone.test/a.png"):
            await _make_prober(handler).head("https://gone.test/a.png")
