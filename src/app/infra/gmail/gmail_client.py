"""Cliente REST da Gmail API para envio raw e aplicação de labels.

Chamadas únicas, sem retry. Logs sem token e sem conteúdo da mensagem.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from app.infra.http import HttpClient, HttpClientConfig
from app.observability import get_correlation_id
from app.protocols.mail_sender import MailSenderProtocol
from config.settings.gmail import GMAIL_API_BASE_URL
from utils.errors import GmailApiError

logger = logging.getLogger(__name__)

_COMPONENT = "gmail_client"
_USER_ID = "me"


def encode_raw_message(raw_message: bytes) -> str:
    """Codifica a mensagem MIME no formato do campo `raw` (base64url)."""
    return base64.urlsafe_b64encode(raw_message).decode("ascii")


class GmailApiClient(MailSenderProtocol):
    """Implementação de MailSenderProtocol sobre a Gmail REST API v1."""

    def __init__(
        self,
        *,
        http_client: HttpClient | None = None,
        api_base_url: str = GMAIL_API_BASE_URL,
    ) -> None:
        self._http = http_client or HttpClient(HttpClientConfig())
        self._api_base_url = api_base_url.rstrip("/")

    def _messages_url(self, suffix: str) -> str:
        return f"{self._api_base_url}/users/{_USER_ID}/messages/{suffix}"

    async def send_raw(self, access_token: str, raw_message: bytes) -> str:
        payload = {"raw": encode_raw_message(raw_message)}
        body = await self._post("send", self._messages_url("send"), access_token, payload)
        message_id = body.get("id")
        if not message_id:
            self._log_error(action="send", status_code=None, error_type="missing_message_id")
            raise GmailApiError("Gmail send não retornou id da mensagem")
        return str(message_id)

    async def modify_labels(
        self,
        access_token: str,
        message_id: str,
        add_label_ids: list[str],
    ) -> None:
        payload = {"addLabelIds": list(add_label_ids)}
        await self._post(
            "modify",
            self._messages_url(f"{message_id}/modify"),
            access_token,
            payload,
        )

    async def _post(
        self,
        action: str,
        url: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        if not access_token or not access_token.strip():
            raise ValueError("access_token é obrigatório para chamadas à Gmail API")

        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            response = await self._http.post_json(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            self._log_error(action=action, status_code=None, error_type=type(exc).__name__)
            raise GmailApiError(f"falha de transporte em Gmail {action}") from exc

        if not response.is_success:
            self._log_error(
                action=action,
                status_code=response.status_code,
                error_type=_error_reason(response),
            )
            raise GmailApiError(
                f"Gmail {action} retornou status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            self._log_error(action=action, status_code=response.status_code, error_type="invalid_json")
            raise GmailApiError(f"resposta JSON inválida em Gmail {action}") from exc
        return body if isinstance(body, dict) else {}

    def _log_error(self, *, action: str, status_code: int | None, error_type: str) -> None:
        logger.error(
            "gmail_api_error",
            extra={
                "component": _COMPONENT,
                "action": action,
                "result": "error",
                "status_code": status_code,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )


def _error_reason(response: httpx.Response) -> str:
    """Extrai `error.status` do corpo de erro Google, sem a mensagem."""
    try:
        error = response.json().get("error", {})
    except (ValueError, AttributeError):
        return "http_status"
    if isinstance(error, dict):
        return str(error.get("status") or "http_status")
    return "http_status"
