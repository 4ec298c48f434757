"""Testes do SendEmailUseCase com fakes in-memory."""

from __future__ import annotations

import logging
from email import message_from_bytes

import pytest

from app.domain.email_request import EmailRequest
from app.infra.auth.credential_cache import CredentialCache
from app.use_cases.send_email import SendEmailUseCase, resolve_labels
from config.settings.gmail import GmailSettings
from tests.fakes.fake_email_clients import FakeMailSender, FakeTokenProvider
from utils.errors import (
    AttachmentTooLargeError,
    ExchangeError,
    GmailApiError,
    LoopProtectionError,
)


def _use_case(
    settings: GmailSettings,
    *,
    provider: FakeTokenProvider | None = None,
    sender: FakeMailSender | None = None,
) -> tuple[SendEmailUseCase, FakeTokenProvider, FakeMailSender]:
    provider = provider or FakeTokenProvider()
    sender = sender or FakeMailSender()
    use_case = SendEmailUseCase(
        settings=settings,
        token_provider=provider,
        credential_cache=CredentialCache(),
        mail_sender=sender,
    )
    return use_case, provider, sender


def _request(**overrides) -> EmailRequest:
    payload = {"recipient": "a@b.com", "subject": "Hi", "body_html": "<p>ok</p>"}
    payload.update(overrides)
    return EmailRequest.model_validate(payload)


class TestResolveLabels:
    def test_combines_explicit_ids_and_flags(self) -> None:
        request = _request(options={"label_ids": ["Label_1"], "starred": True, "important": True})
        assert resolve_labels(request) == ["Label_1", "STARRED", "IMPORTANT"]

    def test_empty_without_options(self) -> None:
        assert resolve_labels(_request()) == []


class TestSendEmailUseCase:
    @pytest.mark.asyncio
    async def test_sends_message_as_alias(self, gmail_settings: GmailSettings) -> None:
        use_case, provider, sender = _use_case(gmail_settings)

        result = await use_case.execute(_request(sender_name="Equipe"))

        assert result.message_id == "msg-123"
        assert result.labels_applied is False
        assert provider.calls == 1
        assert sender.modified == []

        access_token, raw = sender.sent[0]
        assert access_token == "token-1"
        message = message_from_bytes(raw)
        assert message["From"] == '"Equipe" <notifications@example.com>'
        assert message["To"] == "a@b.com"
        assert message["Subject"] == "Hi"

    @pytest.mark.asyncio
    async def test_reuses_credential_between_sends(self, gmail_settings: GmailSettings) -> None:
        use_case, provider, sender = _use_case(gmail_settings)

        await use_case.execute(_request())
        await use_case.execute(_request())

        assert provider.calls == 1
        assert len(sender.sent) == 2

    @pytest.mark.asyncio
    async def test_applies_labels_after_send(self, gmail_settings: GmailSettings) -> None:
        use_case, _, sender = _use_case(gmail_settings)

        result = await use_case.execute(_request(options={"starred": True}))

        assert result.labels_applied is True
        assert sender.modified == [("token-1", "msg-123", ["STARRED"])]

    @pytest.mark.asyncio
    async def test_label_failure_is_swallowed(
        self,
        gmail_settings: GmailSettings,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        use_case, _, _ = _use_case(gmail_settings, sender=FakeMailSender(modify_status=403))

        with caplog.at_level(logging.WARNING, logger="app.use_cases.send_email"):
            result = await use_case.execute(_request(options={"important": True}))

        assert result.message_id == "msg-123"
        assert result.labels_applied is False
        assert result.labels_requested == ["IMPORTANT"]
        assert any(r.getMessage() == "gmail_labels_not_applied" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_loop_protection_blocks_before_auth(self, gmail_settings: GmailSettings) -> None:
        use_case, provider, sender = _use_case(gmail_settings)

        with pytest.raises(LoopProtectionError):
            await use_case.execute(_request(recipient="Notifications@Example.com"))

        assert provider.calls == 0
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_oversized_attachments_block_before_auth(self) -> None:
        settings = GmailSettings(delegated_user_email="admin@example.com", max_total_size_mb=1)
        use_case, provider, _ = _use_case(settings)
        attachment = {"filename": "big.bin", "content_b64": "A" * (2 * 1024 * 1024)}

        with pytest.raises(AttachmentTooLargeError):
            await use_case.execute(_request(attachments=[attachment]))

        assert provider.calls == 0

    @pytest.mark.asyncio
    async def test_auth_failure_sends_nothing(self, gmail_settings: GmailSettings) -> None:
        use_case, _, sender = _use_case(gmail_settings, provider=FakeTokenProvider(fail=True))

        with pytest.raises(ExchangeError):
            await use_case.execute(_request())

        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_send_failure_propagates(self, gmail_settings: GmailSettings) -> None:
        use_case, _, sender = _use_case(gmail_settings, sender=FakeMailSender(send_status=500))

        with pytest.raises(GmailApiError) as exc_info:
            await use_case.execute(_request(options={"starred": True}))

        assert exc_info.value.status_code == 500
        assert sender.modified == []
