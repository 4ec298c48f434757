"""Credencial delegada obtida via troca de JWT.

Nunca persistida; vive apenas no cache do processo.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


@dataclass(frozen=True, slots=True)
class JwtClaimSet:
    """Claims do JWT de Domain-Wide Delegation."""

    issuer: str
    subject: str
    scopes: tuple[str, ...]
    audience: str
    issued_at: int
    expires_at: int

    def to_payload(self) -> str:
        """Serializa claims no formato aceito pelo signJwt."""
        return json.dumps(
            {
                "iss": self.issuer,
                "sub": self.subject,
                "scope": " ".join(self.scopes),
                "aud": self.audience,
                "iat": self.issued_at,
                "exp": self.expires_at,
            }
        )


@dataclass(frozen=True, slots=True)
class DelegatedCredential:
    """Access token de curta duração em nome do usuário delegado."""

    access_token: str
    token_type: str
    expires_at: datetime
    subject: str = ""

    def is_valid(self, *, margin_seconds: int = 0, now: datetime | None = None) -> bool:
        """True se o token ainda vale por pelo menos `margin_seconds`."""
        current = now or datetime.now(UTC)
        return current + timedelta(seconds=margin_seconds) < self.expires_at


__all__ = ["DelegatedCredential", "JwtClaimSet"]
