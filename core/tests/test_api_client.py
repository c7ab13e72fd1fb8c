"""Tests for the admin API client, using httpx.MockTransport."""

import json

import httpx
import pytest

from core.api_client import (
    INVALID_RESPONSE_MESSAGE,
    UNREACHABLE_MESSAGE,
    AdminApiClient,
    ApiError,
)


def _client(handler, token="session-token") -> AdminApiClient:
    return AdminApiClient(
        base_url="http://api.test",
        session_token=token,
        transport=httpx.MockTransport(handler),
    )


class TestRequests:
    """Tests for successful requests."""

    @pytest.mark.asyncio
    async def test_list_form_responses(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(
                200,
                json={"responses": [{"clientId": 7, "formType": "health_evaluation", "responses": {}}]},
            )

        responses = await _client(handler).list_form_responses(7)

        assert seen["path"] == "/api/admin/coaching/clients/7/form-responses"
        assert seen["cookie"] == "session=session-token"
        assert responses[0]["clientId"] == 7

    @pytest.mark.asyncio
    async def test_list_without_responses_key_is_empty(self):
        responses = await _client(lambda r: httpx.Response(200, json={})).list_form_responses(7)
        assert responses == []

    @pytest.mark.asyncio
    async def test_submit_sends_form_type_and_responses(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"clientId": 7, **seen["body"]})

        record = await _client(handler).submit_form_response(
            7, "lifestyle_questionnaire", {"trimester": None}
        )

        assert seen["method"] == "POST"
        assert seen["body"] == {
            "formType": "lifestyle_questionnaire",
            "responses": {"trimester": None},
        }
        assert record["clientId"] == 7

    @pytest.mark.asyncio
    async def test_no_cookie_without_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["cookie"] = request.headers.get("cookie")
            return httpx.Response(200, json={"course": {"id": 1}})

        await _client(handler, token=None).get_course_preview(1)
        assert seen["cookie"] is None


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_detail_message_is_used(self):
        client = _client(lambda r: httpx.Response(404, json={"detail": "Course not found"}))
        with pytest.raises(ApiError) as exc_info:
            await client.get_course_preview(99)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Course not found"

    @pytest.mark.asyncio
    async def test_message_key_is_used(self):
        client = _client(lambda r: httpx.Response(400, json={"message": "Bad input"}))
        with pytest.raises(ApiError) as exc_info:
            await client.get_course_preview(1)
        assert exc_info.value.message == "Bad input"

    @pytest.mark.asyncio
    async def test_fallback_message_for_non_json_body(self):
        client = _client(lambda r: httpx.Response(500, text="Internal Server Error"))
        with pytest.raises(ApiError) as exc_info:
            await client.get_course_preview(1)
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Request failed (500)"

    @pytest.mark.asyncio
    async def test_unreachable_server(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ApiError) as exc_info:
            await _client(handler).list_form_responses(7)
        assert exc_info.value.status_code is None
        assert exc_info.value.message == UNREACHABLE_MESSAGE

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        client = _client(lambda r: httpx.Response(200, text="<html>proxy</html>"))
        with pytest.raises(ApiError) as exc_info:
            await client.list_form_responses(7)
        assert exc_info.value.status_code == 200
        assert exc_info.value.message == INVALID_RESPONSE_MESSAGE

    @pytest.mark.asyncio
    async def test_list_body_where_object_expected(self):
        client = _client(lambda r: httpx.Response(200, json=[{"clientId": 7}]))
        with pytest.raises(ApiError) as exc_info:
            await client.list_form_responses(7)
        assert exc_info.value.message == INVALID_RESPONSE_MESSAGE
