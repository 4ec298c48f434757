"""Testes do endpoint de envio (handlers chamados diretamente)."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from api.routes.email.router import send_email
from app.bootstrap.clients import EmailServiceContext
from app.infra.auth.credential_cache import CredentialCache
from app.observability import get_correlation_id
from config.settings.gmail import GmailSettings
from tests.fakes.fake_email_clients import FakeMailSender, FakeTokenProvider
from utils.errors import BuildError


def _build_request(
    body: bytes,
    state: SimpleNamespace,
    *,
    headers: list[tuple[bytes, bytes]] | None = None,
) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "path": "/send",
        "raw_path": b"/send",
        "query_string": b"",
        "headers": [(b"content-type", b"application/json"), *(headers or [])],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, _receive)


def _state(
    settings: GmailSettings,
    *,
    provider: FakeTokenProvider | None = None,
    sender: FakeMailSender | None = None,
) -> SimpleNamespace:
    context = EmailServiceContext(
        settings=settings,
        token_provider=provider or FakeTokenProvider(),
        mail_sender=sender or FakeMailSender(),
        credential_cache=CredentialCache(),
    )
    return SimpleNamespace(email_context=context)


def _payload(**overrides) -> bytes:
    payload = {"recipient": "a@b.com", "subject": "Hi", "body_html": "<p>ok</p>"}
    payload.update(overrides)
    return json.dumps(payload).encode("utf-8")


def _json(response) -> dict[str, object]:
    return json.loads(response.body.decode("utf-8"))


@pytest.mark.asyncio
async def test_send_returns_message_id(gmail_settings: GmailSettings) -> None:
    sender = FakeMailSender(message_id="18c1")
    request = _build_request(_payload(), _state(gmail_settings, sender=sender))

    response = await send_email(request)

    assert response.status_code == 200
    assert _json(response) == {"status": "sent", "id": "18c1"}
    assert len(sender.sent) == 1


@pytest.mark.asyncio
async def test_echoes_correlation_id_and_resets_context(gmail_settings: GmailSettings) -> None:
    request = _build_request(
        _payload(),
        _state(gmail_settings),
        headers=[(b"x-correlation-id", b"req-42")],
    )

    response = await send_email(request)

    assert response.headers["X-Correlation-ID"] == "req-42"
    assert get_correlation_id() == ""


@pytest.mark.asyncio
async def test_invalid_json_returns_400(gmail_settings: GmailSettings) -> None:
    request = _build_request(b"{not json", _state(gmail_settings))

    response = await send_email(request)

    assert response.status_code == 400
    assert _json(response) == {"detail": "Bad Request"}


@pytest.mark.asyncio
async def test_validation_error_returns_400(gmail_settings: GmailSettings) -> None:
    body = _payload(custom_headers={"X-Tag": "a\r\nBcc: x@y.com"})
    response = await send_email(_build_request(body, _state(gmail_settings)))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_loop_protection_returns_400(gmail_settings: GmailSettings) -> None:
    provider = FakeTokenProvider()
    request = _build_request(
        _payload(recipient="admin@example.com"),
        _state(gmail_settings, provider=provider),
    )

    response = await send_email(request)

    assert response.status_code == 400
    assert _json(response) == {"detail": "Safety Block: Cannot send to self"}
    assert provider.calls == 0


@pytest.mark.asyncio
async def test_oversized_attachments_return_400() -> None:
    settings = GmailSettings(delegated_user_email="admin@example.com", max_total_size_mb=1)
    body = _payload(attachments=[{"filename": "f", "content_b64": "A" * (2 * 1024 * 1024)}])

    response = await send_email(_build_request(body, _state(settings)))

    assert response.status_code == 400
    assert _json(response) == {"detail": "Attachments exceed size limit"}


@pytest.mark.asyncio
async def test_auth_failure_returns_500(gmail_settings: GmailSettings) -> None:
    sender = FakeMailSender()
    request = _build_request(
        _payload(),
        _state(gmail_settings, provider=FakeTokenProvider(fail=True), sender=sender),
    )

    response = await send_email(request)

    assert response.status_code == 500
    assert _json(response) == {"detail": "Auth Configuration Error"}
    assert sender.sent == []


@pytest.mark.asyncio
async def test_build_failure_returns_500(
    gmail_settings: GmailSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _fail(*args, **kwargs):
        raise BuildError("encoding")

    monkeypatch.setattr("app.use_cases.send_email.build_mime", _fail)

    response = await send_email(_build_request(_payload(), _state(gmail_settings)))

    assert response.status_code == 500
    assert _json(response) == {"detail": "Message Build Error"}


@pytest.mark.asyncio
async def test_upstream_failure_returns_502(gmail_settings: GmailSettings) -> None:
    request = _build_request(
        _payload(),
        _state(gmail_settings, sender=FakeMailSender(send_status=500)),
    )

    response = await send_email(request)

    assert response.status_code == 502
    assert _json(response) == {"detail": "Upstream API Error"}


@pytest.mark.asyncio
async def test_label_failure_still_returns_200(gmail_settings: GmailSettings) -> None:
    request = _build_request(
        _payload(options={"starred": True}),
        _state(gmail_settings, sender=FakeMailSender(modify_status=400)),
    )

    response = await send_email(request)

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_missing_configuration_returns_500(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DELEGATED_USER_EMAIL", raising=False)
    monkeypatch.delenv("FUNCTION_IDENTITY_EMAIL", raising=False)

    response = await send_email(_build_request(_payload(), SimpleNamespace(email_context=None)))

    assert response.status_code == 500
    assert _json(response) == {"detail": "Auth Configuration Error"}


@pytest.mark.asyncio
async def test_unencodable_body_returns_500_build_error(gmail_settings: GmailSettings) -> None:
    sender = FakeMailSender()
    body = _payload(body_html="<p>\ud800</p>")
    assert b"\\ud800" in body

    response = await send_email(_build_request(body, _state(gmail_settings, sender=sender)))

    assert response.status_code == 500
    assert _json(response) == {"detail": "Message Build Error"}
    assert sender.sent == []
