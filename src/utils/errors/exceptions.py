"""Exceções do serviço de envio de email via Gmail."""

from __future__ import annotations


class EmailServiceError(RuntimeError):
    """Base para falhas do fluxo de envio."""


class ConfigurationError(EmailServiceError):
    """Configuração obrigatória ausente ou inválida."""


class TokenProviderError(EmailServiceError):
    """Base para falhas na obtenção de credencial delegada."""


class SigningError(TokenProviderError):
    """Falha ao assinar o JWT via IAM Credentials."""


class ExchangeError(TokenProviderError):
    """Falha ao trocar o JWT assinado por access token."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BuildError(EmailServiceError):
    """Falha de encoding ao montar a mensagem MIME."""


class GmailApiError(EmailServiceError):
    """Resposta de erro da Gmail API (sem dados sensíveis)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SafetyBrakeError(EmailServiceError):
    """Requisição bloqueada antes do envio."""


class LoopProtectionError(SafetyBrakeError):
    """Destinatário é a própria conta remetente."""


class AttachmentTooLargeError(SafetyBrakeError):
    """Anexos excedem o limite agregado."""

    def __init__(self, message: str, size_bytes: int) -> None:
        super().__init__(message)
        self.size_bytes = size_bytes
