"""Cache de credencial delegada com renovação single-writer.

Mantido no contexto do serviço (não global). Requisições concorrentes que
encontram o token expirado disputam o lock; a primeira renova e as demais
reutilizam o valor recém-obtido sem nova assinatura/troca.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.observability import get_correlation_id

if TYPE_CHECKING:
    from app.domain.credential import DelegatedCredential
    from app.protocols.token_provider import TokenProviderProtocol

logger = logging.getLogger(__name__)


class CredentialCache:
    """Guarda a última credencial válida e coordena a renovação."""

    def __init__(self, *, refresh_margin_seconds: int = 60) -> None:
        self._refresh_margin_seconds = refresh_margin_seconds
        self._credential: DelegatedCredential | None = None
        self._lock = asyncio.Lock()

    @property
    def current(self) -> DelegatedCredential | None:
        return self._credential

    def _usable(self, credential: DelegatedCredential | None) -> bool:
        return credential is not None and credential.is_valid(
            margin_seconds=self._refresh_margin_seconds
        )

    async def get(self, provider: TokenProviderProtocol) -> DelegatedCredential:
        """Retorna credencial válida, renovando via `provider` se necessário.

        Falhas do provider sobem sem alterar o cache.
        """
        credential = self._credential
        if self._usable(credential):
            return credential  # type: ignore[return-value]

        async with self._lock:
            credential = self._credential
            if self._usable(credential):
                return credential  # type: ignore[return-value]

            fresh = await provider.acquire()
            self._credential = fresh
            logger.info(
                "credential_cache_refreshed",
                extra={
                    "component": "credential_cache",
                    "expires_at": fresh.expires_at.isoformat(),
                    "correlation_id": get_correlation_id(),
                },
            )
            return fresh

    def invalidate(self) -> None:
        self._credential = None
