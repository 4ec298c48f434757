"""Testes do GmailApiClient com httpx.MockTransport."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from app.infra.gmail.gmail_client import GmailApiClient, encode_raw_message
from app.infra.http import HttpClient
from utils.errors import GmailApiError

_BASE = "https://gmail.test/gmail/v1"


def _client(handler) -> GmailApiClient:
    return GmailApiClient(
        http_client=HttpClient(transport=httpx.MockTransport(handler)),
        api_base_url=_BASE,
    )


def test_encode_raw_message_is_urlsafe() -> None:
    raw = b"\xfb\xff\xfe"
    encoded = encode_raw_message(raw)

    assert "+" not in encoded
    assert "/" not in encoded
    assert base64.urlsafe_b64decode(encoded) == raw


@pytest.mark.asyncio
async def test_send_raw_posts_base64url_message() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "18c1", "threadId": "18c1"})

    message_id = await _client(handler).send_raw("tok", b"To: a@b.com\r\n\r\n")

    assert message_id == "18c1"
    request = captured[0]
    assert str(request.url) == f"{_BASE}/users/me/messages/send"
    assert request.headers["Authorization"] == "Bearer tok"
    body = json.loads(request.content)
    assert base64.urlsafe_b64decode(body["raw"]) == b"To: a@b.com\r\n\r\n"


@pytest.mark.asyncio
async def test_send_raw_error_status_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            403,
            json={"error": {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}},
        )

    with pytest.raises(GmailApiError) as exc_info:
        await _client(handler).send_raw("tok", b"x")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_send_raw_without_id_raises() -> None:
    with pytest.raises(GmailApiError):
        await _client(lambda request: httpx.Response(200, json={})).send_raw("tok", b"x")


@pytest.mark.asyncio
async def test_send_raw_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timeout", request=request)

    with pytest.raises(GmailApiError) as exc_info:
        await _client(handler).send_raw("tok", b"x")

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_send_raw_requires_access_token() -> None:
    with pytest.raises(ValueError, match="access_token"):
        await _client(lambda request: httpx.Response(200, json={"id": "1"})).send_raw(" ", b"x")


@pytest.mark.asyncio
async def test_modify_labels_posts_add_label_ids() -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "18c1", "labelIds": ["STARRED"]})

    await _client(handler).modify_labels("tok", "18c1", ["STARRED", "IMPORTANT"])

    request = captured[0]
    assert str(request.url) == f"{_BASE}/users/me/messages/18c1/modify"
    assert json.loads(request.content) == {"addLabelIds": ["STARRED", "IMPORTANT"]}


@pytest.mark.asyncio
async def test_modify_labels_error_raises() -> None:
    with pytest.raises(GmailApiError) as exc_info:
        await _client(lambda request: httpx.Response(404, text="nope")).modify_labels(
            "tok", "x", ["L"]
        )
    assert exc_info.value.status_code == 404
