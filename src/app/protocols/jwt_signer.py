"""Contrato do colaborador de assinatura remota (keyless signing)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class JwtSignerProtocol(Protocol):
    """Assina um claim set JSON sem chave privada local."""

    async def sign_jwt(self, payload: str) -> str:
        """Retorna o JWT assinado ou levanta SigningError."""
        ...
