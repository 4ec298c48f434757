"""Factories de clientes externos: IAM signer, token provider e Gmail.

Todos os clientes de um processo ficam reunidos em EmailServiceContext,
guardado em app.state e entregue aos handlers por dependência.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.infra.auth.credential_cache import CredentialCache
from app.infra.auth.keyless_token_provider import KeylessTokenProvider
from app.infra.gmail.gmail_client import GmailApiClient
from app.infra.http import HttpClient, HttpClientConfig
from app.services.html_sanitizer import SanitizationPolicyRegistry, default_policy_registry
from app.use_cases.send_email import SendEmailUseCase
from utils.errors import ConfigurationError

if TYPE_CHECKING:
    from app.protocols.jwt_signer import JwtSignerProtocol
    from app.protocols.mail_sender import MailSenderProtocol
    from app.protocols.token_provider import TokenProviderProtocol
    from config.settings.gmail import GmailSettings

logger = logging.getLogger(__name__)


@dataclass
class EmailServiceContext:
    """Estado compartilhado entre requisições de um mesmo processo."""

    settings: GmailSettings
    token_provider: TokenProviderProtocol
    mail_sender: MailSenderProtocol
    credential_cache: CredentialCache
    policy_registry: SanitizationPolicyRegistry = field(
        default_factory=lambda: default_policy_registry
    )

    def send_email_use_case(self) -> SendEmailUseCase:
        return SendEmailUseCase(
            settings=self.settings,
            token_provider=self.token_provider,
            credential_cache=self.credential_cache,
            mail_sender=self.mail_sender,
            policy_registry=self.policy_registry,
        )


def create_http_client(settings: GmailSettings) -> HttpClient:
    return HttpClient(HttpClientConfig(timeout_seconds=settings.request_timeout_seconds))


def create_jwt_signer(settings: GmailSettings) -> JwtSignerProtocol:
    """Cria signer IAM autenticado com Application Default Credentials."""
    from app.infra.auth.iam_signer import IamCredentialsJwtSigner

    signer = IamCredentialsJwtSigner(service_account_email=settings.function_identity_email)
    logger.info("iam_signer_created", extra={"component": "bootstrap"})
    return signer


def create_token_provider(
    settings: GmailSettings,
    *,
    signer: JwtSignerProtocol | None = None,
    http_client: HttpClient | None = None,
) -> KeylessTokenProvider:
    if not settings.delegated_user_email or not settings.function_identity_email:
        msg = "missing required env vars: DELEGATED_USER_EMAIL or FUNCTION_IDENTITY_EMAIL"
        raise ConfigurationError(msg)

    return KeylessTokenProvider(
        signer=signer or create_jwt_signer(settings),
        issuer_email=settings.function_identity_email,
        delegated_user_email=settings.delegated_user_email,
        scopes=settings.scopes,
        http_client=http_client or create_http_client(settings),
    )


def create_email_service_context(
    settings: GmailSettings,
    *,
    signer: JwtSignerProtocol | None = None,
    http_client: HttpClient | None = None,
) -> EmailServiceContext:
    """Monta o contexto do serviço (uma vez por processo)."""
    http = http_client or create_http_client(settings)
    context = EmailServiceContext(
        settings=settings,
        token_provider=create_token_provider(settings, signer=signer, http_client=http),
        mail_sender=GmailApiClient(http_client=http, api_base_url=settings.api_base_url),
        credential_cache=CredentialCache(
            refresh_margin_seconds=settings.token_refresh_margin_seconds
        ),
    )
    logger.info("email_service_context_created", extra={"component": "bootstrap"})
    return context
