"""Configuração do pytest para o serviço de envio de email."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from config.settings import get_base_settings, get_gmail_settings  # noqa: E402
from config.settings.gmail import GmailSettings  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings são lru_cache; cada teste lê o ambiente do zero."""
    get_base_settings.cache_clear()
    get_gmail_settings.cache_clear()
    yield
    get_base_settings.cache_clear()
    get_gmail_settings.cache_clear()


@pytest.fixture
def gmail_settings() -> GmailSettings:
    return GmailSettings(
        delegated_user_email="admin@example.com",
        alias_user_email="notifications@example.com",
        function_identity_email="handler@project.iam.gserviceaccount.com",
    )
