"""Agregador de settings do serviço.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.gmail import (
    DEFAULT_SCOPES,
    GMAIL_API_BASE_URL,
    GMAIL_MODIFY_SCOPE,
    GMAIL_SEND_SCOPE,
    GmailSettings,
    get_gmail_settings,
)

__all__ = [
    # Constants
    "DEFAULT_SCOPES",
    "GMAIL_API_BASE_URL",
    "GMAIL_MODIFY_SCOPE",
    "GMAIL_SEND_SCOPE",
    # Base
    "BaseSettings",
    "Environment",
    # Gmail
    "GmailSettings",
    "get_base_settings",
    "get_gmail_settings",
]
