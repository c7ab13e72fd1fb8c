"""
Intake editor view-model and the per-client response cache.

The editor owns one dialog's worth of state: the FormState being edited,
whether a save is in flight, and the notice to show. Saves go through
AdminApiClient; on success the client's cached responses are invalidated
before `save` returns, so the next read refetches.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

import sentry_sdk

from core.api_client import AdminApiClient, ApiError, CancellationToken
from core.enums import FormType
from core.notices import (
    Notice,
    error_notice,
    success_notice,
    validation_notice,
)

from .form import (
    FormState,
    IntakeResponse,
    has_answers,
    is_visible,
    load_for_edit,
    set_field,
    to_submission,
)
from .schemas import get_schema

logger = logging.getLogger(__name__)


SaveStatus = Literal["saved", "invalid", "failed", "cancelled"]


@dataclass(frozen=True)
class SaveResult:
    status: SaveStatus
    notice: Notice | None = None
    response: IntakeResponse | None = None

    @property
    def ok(self) -> bool:
        return self.status == "saved"


FetchResponses = Callable[[int], Awaitable[list[dict]]]


class ResponseCache:
    """Per-client cache of stored questionnaires."""

    def __init__(self, fetch: FetchResponses):
        self._fetch = fetch
        self._entries: dict[int, list[IntakeResponse]] = {}

    async def get(self, client_id: int) -> list[IntakeResponse]:
        """Cached responses for a client, fetching on first access."""
        if client_id not in self._entries:
            records = await self._fetch(client_id)
            self._entries[client_id] = [IntakeResponse.from_dict(r) for r in records]
        return self._entries[client_id]

    async def find(
        self, client_id: int, form_type: FormType | str
    ) -> IntakeResponse | None:
        """The client's response for one form type, or None if not submitted."""
        wanted = FormType(form_type)
        for response in await self.get(client_id):
            if response.form_type == wanted:
                return response
        return None

    def invalidate(self, client_id: int) -> None:
        self._entries.pop(client_id, None)

    def is_cached(self, client_id: int) -> bool:
        return client_id in self._entries


class IntakeEditor:
    """Edit dialog for one client's questionnaire of one form type."""

    def __init__(
        self,
        api: AdminApiClient,
        cache: ResponseCache,
        client_id: int | None,
        form_type: FormType | str,
    ):
        self.api = api
        self.cache = cache
        self.client_id = client_id
        self.schema = get_schema(form_type)
        self.state: FormState = load_for_edit(self.schema)
        self.notice: Notice | None = None
        self._saving = False

    @property
    def is_saving(self) -> bool:
        return self._saving

    def open(self, existing: IntakeResponse | None = None) -> FormState:
        """Reset the dialog to the stored response (or blank defaults)."""
        self.state = load_for_edit(self.schema, existing)
        self.notice = None
        return self.state

    async def load(self, token: CancellationToken | None = None) -> FormState | None:
        """Open the dialog with whatever the cache holds for this client.

        Returns None if the token was cancelled while the fetch ran, or if
        the fetch failed (the failure is left in `notice`).
        """
        if self.client_id is None:
            self.notice = validation_notice("No client selected.")
            return None
        try:
            existing = await self.cache.find(self.client_id, self.schema.form_type)
        except ApiError as e:
            if token is not None and token.cancelled:
                return None
            self.notice = error_notice(e.message)
            return None
        except Exception as e:
            logger.error(f"Unexpected error loading responses for client {self.client_id}: {e}")
            sentry_sdk.capture_exception(e)
            if token is not None and token.cancelled:
                return None
            self.notice = error_notice(None)
            return None
        if token is not None and token.cancelled:
            return None
        return self.open(existing)

    def set(self, name: str, value) -> FormState:
        self.state = set_field(self.state, name, value)
        return self.state

    def visible(self, name: str) -> bool:
        return is_visible(self.state, name)

    async def save(self, token: CancellationToken | None = None) -> SaveResult:
        """
        Submit the current state.

        No retry on failure; the operator saves again. The in-progress state
        is kept whatever the outcome.
        """
        if self.client_id is None:
            notice = validation_notice("No client selected.")
            self.notice = notice
            return SaveResult("invalid", notice)
        if self._saving:
            return SaveResult("invalid", validation_notice("A save is already in progress."))
        if not has_answers(self.state):
            notice = validation_notice("Nothing to submit.")
            self.notice = notice
            return SaveResult("invalid", notice)

        client_id = self.client_id
        self._saving = True
        try:
            record = await self.api.submit_form_response(
                client_id, self.schema.form_type, to_submission(self.state)
            )
        except ApiError as e:
            logger.warning(f"Saving {self.schema.form_type.value} for client {client_id} failed: {e}")
            return self._finish_failed(error_notice(e.message), token)
        except Exception as e:
            logger.error(f"Unexpected error saving {self.schema.form_type.value}: {e}")
            sentry_sdk.capture_exception(e)
            return self._finish_failed(error_notice(None), token)
        finally:
            self._saving = False

        # Acknowledged: invalidate even if the view has gone away
        self.cache.invalidate(client_id)

        response = IntakeResponse.from_dict(record)
        if token is not None and token.cancelled:
            return SaveResult("cancelled", response=response)

        notice = success_notice(f"{self.schema.title} saved.")
        self.notice = notice
        return SaveResult("saved", notice, response)

    def _finish_failed(
        self, notice: Notice, token: CancellationToken | None
    ) -> SaveResult:
        if token is not None and token.cancelled:
            return SaveResult("cancelled", notice)
        self.notice = notice
        return SaveResult("failed", notice)
