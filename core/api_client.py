"""Async HTTP client for the admin API, used by the intake and course views."""

import logging
from typing import Any

import httpx

from core.config import get_api_base_url
from core.enums import FormType

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Could not reach the server"
INVALID_RESPONSE_MESSAGE = "Invalid response from server"


class CancellationToken:
    """Marks a pending request as no longer wanted by its view.

    The request itself still runs to completion; only its effect on view
    state is skipped.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ApiError(Exception):
    """Raised when an admin API request fails.

    `status_code` is None when the server could not be reached at all.
    """

    def __init__(self, status_code: int | None, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    """Server-provided message (FastAPI `detail` or `message`), else a fallback."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("detail", "message"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"Request failed ({response.status_code})"


class AdminApiClient:
    """Thin wrapper over httpx for the admin endpoints.

    A new AsyncClient is opened per request. Pass `transport` to route
    requests somewhere other than the network (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        session_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.session_token = session_token
        self.transport = transport
        self.timeout = timeout

    async def _request(
        self, method: str, path: str, json: dict | None = None
    ) -> Any:
        cookies = {"session": self.session_token} if self.session_token else None
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                cookies=cookies,
                transport=self.transport,
                timeout=self.timeout,
            ) as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(None, UNREACHABLE_MESSAGE) from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise ApiError(response.status_code, message)

        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"{method} {path} returned a non-JSON body: {e}")
            raise ApiError(response.status_code, INVALID_RESPONSE_MESSAGE) from e

    async def list_form_responses(self, client_id: int) -> list[dict]:
        """All stored questionnaires for a client (may be empty)."""
        data = await self._request(
            "GET", f"/api/admin/coaching/clients/{client_id}/form-responses"
        )
        if not isinstance(data, dict) or not isinstance(data.get("responses", []), list):
            raise ApiError(200, INVALID_RESPONSE_MESSAGE)
        return data.get("responses", [])

    async def submit_form_response(
        self,
        client_id: int,
        form_type: FormType | str,
        responses: dict[str, Any],
    ) -> dict:
        """Upsert one questionnaire. Returns the stored record."""
        return await self._request(
            "POST",
            f"/api/admin/coaching/clients/{client_id}/form-responses",
            json={"formType": FormType(form_type).value, "responses": responses},
        )

    async def get_course_preview(self, course_id: int) -> dict:
        """Course tree as members see it, with audit stats."""
        return await self._request("GET", f"/api/admin/courses/{course_id}/preview")
