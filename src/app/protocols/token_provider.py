"""Contrato do provedor de credencial delegada."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from app.domain.credential import DelegatedCredential


@runtime_checkable
class TokenProviderProtocol(Protocol):
    """Produz um access token novo a cada chamada (sem cache)."""

    async def acquire(self) -> DelegatedCredential:
        """Levanta SigningError ou ExchangeError em caso de falha."""
        ...
