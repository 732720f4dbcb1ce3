"""
Tests for the REST client
"""
import json

import httpx
import pytest

from portal.api.client import ApiClient, _error_message
from portal.api.errors import ApiError
from portal.config import GENERIC_ERROR_MESSAGE, NETWORK_ERROR_MESSAGE

BASE_URL = "http://portal.test/api"


def make_client(session, handler, **kwargs) -> ApiClient:
    return ApiClient(
        session, base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs
    )


@pytest.mark.asyncio
async def test_get_sends_bearer_and_params(session):
    """Token and query params reach the server"""
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"id": "c1"}])

    async with make_client(session, handler) as client:
        body = await client.get("/courses", params={"search": "CS", "semester": "Fall 2024"})

    assert body == [{"id": "c1"}]
    assert seen["auth"] == "Bearer test-token"
    assert seen["path"] == "/api/courses"
    assert seen["params"] == {"search": "CS", "semester": "Fall 2024"}


@pytest.mark.asyncio
async def test_no_token_no_authorization_header(session):
    session.clear()

    def handler(request):
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={"ok": True})

    async with make_client(session, handler) as client:
        assert await client.get("/health") == {"ok": True}


@pytest.mark.asyncio
async def test_post_sends_json_body(session):
    def handler(request):
        assert request.method == "POST"
        assert json.loads(request.content) == {"code": "CS101"}
        return httpx.Response(201, json={"id": "c1"})

    async with make_client(session, handler) as client:
        assert await client.post("/courses", {"code": "CS101"}) == {"id": "c1"}


@pytest.mark.asyncio
async def test_empty_success_body_is_none(session):
    async with make_client(session, lambda r: httpx.Response(204)) as client:
        assert await client.delete("/courses/c1") is None


@pytest.mark.asyncio
async def test_server_rejection_carries_status_and_message(session):
    def handler(request):
        return httpx.Response(404, json={"message": "Not found"})

    async with make_client(session, handler) as client:
        with pytest.raises(ApiError) as info:
            await client.delete("/courses/abc")

    err = info.value
    assert err.status == 404
    assert err.message == "Not found"
    assert err.data == {"message": "Not found"}
    assert err.user_message("Failed to delete course") == "Not found"


@pytest.mark.asyncio
async def test_rejection_without_message_uses_fallback(session):
    async with make_client(session, lambda r: httpx.Response(500, text="")) as client:
        with pytest.raises(ApiError) as info:
            await client.get("/courses")

    assert info.value.message == GENERIC_ERROR_MESSAGE
    assert info.value.user_message("Failed to load courses") == "Failed to load courses"


@pytest.mark.asyncio
async def test_network_failure(session):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(session, handler) as client:
        with pytest.raises(ApiError) as info:
            await client.get("/courses")

    assert info.value.status is None
    assert info.value.is_network_error
    assert info.value.user_message("Failed to load courses") == NETWORK_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_unauthorized_clears_session_and_calls_hook(session):
    """401 signs the user out globally"""
    fired = []

    async with make_client(
        session,
        lambda r: httpx.Response(401, json={"message": "Token expired"}),
        on_unauthorized=lambda: fired.append(True),
    ) as client:
        with pytest.raises(ApiError) as info:
            await client.get("/courses")

    assert info.value.status == 401
    assert fired == [True]
    assert session.token is None
    assert not session.is_authenticated


@pytest.mark.asyncio
async def test_failing_unauthorized_hook_is_logged(session, caplog):
    def hook():
        raise RuntimeError("ui gone")

    async with make_client(
        session, lambda r: httpx.Response(401), on_unauthorized=hook
    ) as client:
        with pytest.raises(ApiError):
            await client.get("/courses")

    assert "on_unauthorized hook failed" in caplog.text


class TestErrorMessage:
    """Server message precedence"""

    def test_message_first(self):
        assert _error_message({"message": "m", "error": "e", "detail": "d"}) == "m"

    def test_error_then_detail(self):
        assert _error_message({"error": "e", "detail": "d"}) == "e"
        assert _error_message({"detail": "d"}) == "d"

    def test_list_messages_are_joined(self):
        assert _error_message({"message": ["code taken", "name too short"]}) == (
            "code taken, name too short"
        )

    def test_nothing_usable(self):
        assert _error_message({"status": 500}) is None
        assert _error_message("plain text") is None
