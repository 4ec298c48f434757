"""Use case de envio de email com Domain-Wide Delegation.

Ordem:
1. Freios de segurança (loop, tamanho de anexos)
2. Credencial delegada via cache (renova só quando expirada)
3. Injeção do alias como remetente
4. Montagem MIME com sanitização
5. Envio raw
6. Labels pós-envio (falha apenas logada)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.constants.email import GmailLabel
from app.observability import get_correlation_id, record_latency, record_send_outcome
from app.services.mime_builder import build_mime
from app.services.safety_brakes import apply_safety_brakes
from utils.errors import GmailApiError

if TYPE_CHECKING:
    from app.domain.email_request import EmailRequest
    from app.infra.auth.credential_cache import CredentialCache
    from app.protocols.mail_sender import MailSenderProtocol
    from app.protocols.token_provider import TokenProviderProtocol
    from app.services.html_sanitizer import SanitizationPolicyRegistry
    from config.settings.gmail import GmailSettings

logger = logging.getLogger(__name__)

_COMPONENT = "send_email"


@dataclass(frozen=True)
class SendEmailResult:
    """Resultado de um envio concluído."""

    message_id: str
    labels_requested: list[str] = field(default_factory=list)
    labels_applied: bool = False


def resolve_labels(request: EmailRequest) -> list[str]:
    """Combina label_ids explícitos com as flags starred/important."""
    labels = list(request.options.label_ids)
    if request.options.starred:
        labels.append(GmailLabel.STARRED.value)
    if request.options.important:
        labels.append(GmailLabel.IMPORTANT.value)
    return labels


class SendEmailUseCase:
    """Orquestra autenticação, montagem, envio e rotulagem."""

    def __init__(
        self,
        *,
        settings: GmailSettings,
        token_provider: TokenProviderProtocol,
        credential_cache: CredentialCache,
        mail_sender: MailSenderProtocol,
        policy_registry: SanitizationPolicyRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._token_provider = token_provider
        self._credential_cache = credential_cache
        self._mail_sender = mail_sender
        self._policy_registry = policy_registry

    async def execute(self, request: EmailRequest) -> SendEmailResult:
        """Executa o envio.

        Raises:
            SafetyBrakeError: Requisição bloqueada (nada enviado).
            TokenProviderError: Falha de assinatura/troca (nada enviado).
            BuildError: Falha de encoding (nada enviado).
            GmailApiError: Falha no envio.
        """
        apply_safety_brakes(request, self._settings)

        started_at = time.perf_counter()
        credential = await self._credential_cache.get(self._token_provider)
        record_latency(
            _COMPONENT,
            "acquire_token",
            (time.perf_counter() - started_at) * 1000,
            get_correlation_id(),
        )

        outgoing = request.with_sender(self._settings.alias_user_email)
        raw_message = build_mime(outgoing, policy_registry=self._policy_registry)

        started_at = time.perf_counter()
        message_id = await self._mail_sender.send_raw(credential.access_token, raw_message)
        record_latency(
            _COMPONENT,
            "gmail_send",
            (time.perf_counter() - started_at) * 1000,
            get_correlation_id(),
        )

        labels = resolve_labels(request)
        labels_applied = await self._apply_labels(credential.access_token, message_id, labels)

        logger.info(
            "email_sent",
            extra={
                "component": _COMPONENT,
                "message_id": message_id,
                "recipient": request.recipient,
                "sent_as": self._settings.alias_user_email,
                "campaign_id": request.campaign_id,
                "correlation_id": get_correlation_id(),
            },
        )
        record_send_outcome(
            "sent",
            campaign_id=request.campaign_id,
            correlation_id=get_correlation_id(),
        )
        return SendEmailResult(
            message_id=message_id,
            labels_requested=labels,
            labels_applied=labels_applied,
        )

    async def _apply_labels(self, access_token: str, message_id: str, labels: list[str]) -> bool:
        if not labels:
            return False
        try:
            await self._mail_sender.modify_labels(access_token, message_id, labels)
        except GmailApiError as exc:
            # O email já foi enviado; a resposta continua sendo sucesso.
            logger.warning(
                "gmail_labels_not_applied",
                extra={
                    "component": _COMPONENT,
                    "message_id": message_id,
                    "labels": labels,
                    "status_code": exc.status_code,
                    "correlation_id": get_correlation_id(),
                },
            )
            return False
        return True
