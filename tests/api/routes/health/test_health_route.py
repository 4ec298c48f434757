"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check
from app.bootstrap.clients import EmailServiceContext
from app.domain.credential import DelegatedCredential
from app.infra.auth.credential_cache import CredentialCache
from tests.fakes.fake_email_clients import FakeMailSender, FakeTokenProvider


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


def _set_required_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DELEGATED_USER_EMAIL", "admin@example.com")
    monkeypatch.setenv("ALIAS_USER_EMAIL", "notifications@example.com")
    monkeypatch.setenv("FUNCTION_IDENTITY_EMAIL", "handler@project.iam.gserviceaccount.com")


@pytest.mark.asyncio
async def test_health_reports_service_name(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SERVICE_NAME", "gmail_handler_test")

    response = await health_check()

    assert response.status == "healthy"
    assert response.service == "gmail_handler_test"


@pytest.mark.asyncio
async def test_readiness_returns_not_ready_without_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    for name in ("DELEGATED_USER_EMAIL", "ALIAS_USER_EMAIL", "FUNCTION_IDENTITY_EMAIL"):
        monkeypatch.delenv(name, raising=False)

    response = await readiness_check(_build_request_with_state(SimpleNamespace()))
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["settings"]["status"] == "failed"
    assert payload["checks"]["settings"]["error_count"] == 3
    assert payload["checks"]["email_context"]["status"] == "not_initialized"


@pytest.mark.asyncio
async def test_readiness_returns_ready_with_cached_credential(
    monkeypatch: pytest.MonkeyPatch,
    gmail_settings,
) -> None:
    _set_required_env(monkeypatch)
    cache = CredentialCache()
    cache._credential = DelegatedCredential(
        access_token="t",
        token_type="Bearer",
        expires_at=datetime.now(UTC) + timedelta(hours=1),
    )
    context = EmailServiceContext(
        settings=gmail_settings,
        token_provider=FakeTokenProvider(),
        mail_sender=FakeMailSender(),
        credential_cache=cache,
    )

    response = await readiness_check(
        _build_request_with_state(SimpleNamespace(email_context=context))
    )
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["email_context"]["status"] == "ok"
    assert payload["checks"]["credential"]["status"] == "cached"
