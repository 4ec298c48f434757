"""Protocolos e contratos do core da aplicação."""

from .jwt_signer import JwtSignerProtocol
from .mail_sender import MailSenderProtocol
from .token_provider import TokenProviderProtocol

__all__ = [
    "JwtSignerProtocol",
    "MailSenderProtocol",
    "TokenProviderProtocol",
]
