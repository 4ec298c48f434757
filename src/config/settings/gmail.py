"""Settings do envio via Gmail API com Domain-Wide Delegation.

Identidades envolvidas:
- FUNCTION_IDENTITY_EMAIL: service account do próprio serviço (emissor do JWT)
- DELEGATED_USER_EMAIL: usuário Workspace personificado (sub do JWT)
- ALIAS_USER_EMAIL: endereço usado no cabeçalho From
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

GMAIL_API_BASE_URL: str = "https://gmail.googleapis.com/gmail/v1"
GMAIL_SEND_SCOPE: str = "https://www.googleapis.com/auth/gmail.send"
GMAIL_MODIFY_SCOPE: str = "https://www.googleapis.com/auth/gmail.modify"
DEFAULT_SCOPES: tuple[str, ...] = (GMAIL_SEND_SCOPE, GMAIL_MODIFY_SCOPE)


@dataclass(frozen=True)
class GmailSettings:
    """Configurações do envio de email.

    Attributes:
        delegated_user_email: Usuário personificado via DWD
        alias_user_email: Endereço de envio (From) e alvo da proteção de loop
        function_identity_email: Service account que assina o JWT
        scopes: Escopos OAuth solicitados
        api_base_url: URL base da Gmail API
        max_total_size_mb: Limite agregado dos anexos (antes do base64)
        request_timeout_seconds: Timeout para chamadas HTTP
        token_refresh_margin_seconds: Antecedência para renovar o token
    """

    delegated_user_email: str = ""
    alias_user_email: str = ""
    function_identity_email: str = ""
    scopes: tuple[str, ...] = field(default=DEFAULT_SCOPES)
    api_base_url: str = GMAIL_API_BASE_URL

    max_total_size_mb: int = 20
    request_timeout_seconds: float = 30.0
    token_refresh_margin_seconds: int = 60

    @property
    def max_attachment_b64_bytes(self) -> float:
        """Limite em bytes do conteúdo base64 (overhead de ~33%)."""
        return self.max_total_size_mb * 1024 * 1024 * 1.33

    def validate(self) -> list[str]:
        """Valida configurações mínimas para autenticação e envio.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.delegated_user_email:
            errors.append("DELEGATED_USER_EMAIL não configurado")

        if not self.function_identity_email:
            errors.append("FUNCTION_IDENTITY_EMAIL não configurado")

        if not self.alias_user_email:
            errors.append("ALIAS_USER_EMAIL não configurado")

        if not self.scopes:
            errors.append("GMAIL_SCOPES não pode ser vazio")

        if self.max_total_size_mb <= 0:
            errors.append("GMAIL_MAX_TOTAL_SIZE_MB deve ser > 0")

        if self.request_timeout_seconds <= 0:
            errors.append("GMAIL_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.token_refresh_margin_seconds < 0:
            errors.append("GMAIL_TOKEN_REFRESH_MARGIN_SECONDS deve ser >= 0")

        return errors


def _parse_scopes(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return DEFAULT_SCOPES
    return tuple(scope.strip() for scope in raw.split(",") if scope.strip())


def _load_from_env() -> GmailSettings:
    """Carrega GmailSettings a partir de variáveis de ambiente."""
    return GmailSettings(
        delegated_user_email=os.getenv("DELEGATED_USER_EMAIL", ""),
        alias_user_email=os.getenv("ALIAS_USER_EMAIL", ""),
        function_identity_email=os.getenv("FUNCTION_IDENTITY_EMAIL", ""),
        scopes=_parse_scopes(os.getenv("GMAIL_SCOPES")),
        api_base_url=os.getenv("GMAIL_API_BASE_URL", GMAIL_API_BASE_URL),
        max_total_size_mb=int(os.getenv("GMAIL_MAX_TOTAL_SIZE_MB", "20")),
        request_timeout_seconds=float(os.getenv("GMAIL_REQUEST_TIMEOUT_SECONDS", "30")),
        token_refresh_margin_seconds=int(
            os.getenv("GMAIL_TOKEN_REFRESH_MARGIN_SECONDS", "60")
        ),
    )


@lru_cache(maxsize=1)
def get_gmail_settings() -> GmailSettings:
    """Retorna instância cacheada de GmailSettings."""
    return _load_from_env()
