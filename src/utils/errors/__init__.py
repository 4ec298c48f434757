"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AttachmentTooLargeError,
    BuildError,
    ConfigurationError,
    EmailServiceError,
    ExchangeError,
    GmailApiError,
    LoopProtectionError,
    SafetyBrakeError,
    SigningError,
    TokenProviderError,
)

__all__ = [
    "AttachmentTooLargeError",
    "BuildError",
    "ConfigurationError",
    "EmailServiceError",
    "ExchangeError",
    "GmailApiError",
    "LoopProtectionError",
    "SafetyBrakeError",
    "SigningError",
    "TokenProviderError",
]
