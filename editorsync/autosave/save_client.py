import httpx

from editorsync.autosave.models import SaveErrorKind, SaveResult
from editorsync.logging.logger import Log

STALE_EDIT_MARKER = "modified in another session"


class SaveDraftClient:
    """Calls the draft save endpoint and maps responses to SaveResult.

    Response mapping:
        2xx                                   -> success, new version = updated_at
        409 + "modified in another session"   -> StaleEdit
        401 / 403                             -> Unauthorized
        413                                   -> TooLarge
        any other status                      -> InternalError
        transport failure                     -> NetworkError
    """

    SAVE_PATH = "/api/blog/save-draft"

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def save(self, document_id: int, body: str, expected_version: int) -> SaveResult:
        try:
            response = await self._client.post(
                f"{self._base_url}{self.SAVE_PATH}",
                json={
                    "id": document_id,
                    "body": body,
                    "expected_updated_at": expected_version,
                },
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            Log.warning(f"Save request for document {document_id} failed: {exc}")
            return SaveResult.failed(
                SaveErrorKind.NETWORK_ERROR,
                "Save failed. Check your network connection.",
            )

        if response.is_success:
            try:
                return SaveResult.ok(int(response.json()["updated_at"]))
            except (ValueError, KeyError, TypeError) as exc:
                return SaveResult.failed(
                    SaveErrorKind.INTERNAL_ERROR, f"Malformed save response: {exc}"
                )

        message = self._error_message(response)
        status = response.status_code
        if status == 409 and message and STALE_EDIT_MARKER in message:
            return SaveResult.failed(SaveErrorKind.STALE_EDIT, message)
        if status in (401, 403):
            return SaveResult.failed(
                SaveErrorKind.UNAUTHORIZED,
                "Your session has expired. Please re-authenticate.",
            )
        if status == 413:
            return SaveResult.failed(
                SaveErrorKind.TOO_LARGE, message or "Post content is too large."
            )
        return SaveResult.failed(
            SaveErrorKind.INTERNAL_ERROR, message or "Something went wrong. Try again."
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        try:
            data = response.json()
        except ValueError:
            return None
        if isinstance(data, dict):
            message = data.get("message")
            return str(message) if message else None
        return None
