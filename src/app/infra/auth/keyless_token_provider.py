"""Provedor keyless de access token para Domain-Wide Delegation.

Fluxo de `acquire()`:
1. Monta o claim set (iss=service account, sub=usuário delegado, scope, aud, iat, exp)
2. Pede ao colaborador de assinatura (IAM) que assine o claim set
3. Troca o JWT assinado por access token no endpoint OAuth (grant jwt-bearer)

Sem retry e sem cache: a reutilização do token é responsabilidade do
CredentialCache do chamador.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import httpx

from app.constants.email import JWT_LIFETIME_SECONDS, OAUTH2_GRANT_TYPE, OAUTH2_TOKEN_URL
from app.domain.credential import DelegatedCredential, JwtClaimSet
from app.infra.http import HttpClient, HttpClientConfig
from app.observability import get_correlation_id
from app.protocols.token_provider import TokenProviderProtocol
from utils.errors import ExchangeError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from app.protocols.jwt_signer import JwtSignerProtocol

logger = logging.getLogger(__name__)

_COMPONENT = "keyless_token_provider"


class KeylessTokenProvider(TokenProviderProtocol):
    """Produz DelegatedCredential sem chave privada local."""

    def __init__(
        self,
        *,
        signer: JwtSignerProtocol,
        issuer_email: str,
        delegated_user_email: str,
        scopes: Sequence[str],
        http_client: HttpClient | None = None,
        token_url: str = OAUTH2_TOKEN_URL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._signer = signer
        self._issuer_email = issuer_email
        self._delegated_user_email = delegated_user_email
        self._scopes = tuple(scopes)
        self._http = http_client or HttpClient(HttpClientConfig())
        self._token_url = token_url
        self._clock = clock

    def build_claims(self) -> JwtClaimSet:
        issued_at = int(self._clock())
        return JwtClaimSet(
            issuer=self._issuer_email,
            subject=self._delegated_user_email,
            scopes=self._scopes,
            audience=self._token_url,
            issued_at=issued_at,
            expires_at=issued_at + JWT_LIFETIME_SECONDS,
        )

    async def acquire(self) -> DelegatedCredential:
        """Obtém um access token novo.

        Raises:
            SigningError: Se o IAM falhar ao assinar o claim set.
            ExchangeError: Se o endpoint OAuth rejeitar a asserção ou
                responder com corpo inválido.
        """
        claims = self.build_claims()
        signed_jwt = await self._signer.sign_jwt(claims.to_payload())
        response = await self._exchange(signed_jwt)
        credential = self._parse_token_response(response)

        logger.info(
            "delegated_token_acquired",
            extra={
                "component": _COMPONENT,
                "result": "ok",
                "expires_at": credential.expires_at.isoformat(),
                "scope_count": len(self._scopes),
                "correlation_id": get_correlation_id(),
            },
        )
        return credential

    async def _exchange(self, signed_jwt: str) -> httpx.Response:
        form = {"grant_type": OAUTH2_GRANT_TYPE, "assertion": signed_jwt}
        try:
            response = await self._http.post_form(self._token_url, data=form)
        except httpx.HTTPError as exc:
            self._log_exchange_error(status_code=None, error_type=type(exc).__name__)
            raise ExchangeError("falha de transporte na troca do JWT") from exc

        if response.status_code != httpx.codes.OK:
            self._log_exchange_error(status_code=response.status_code, error_type="http_status")
            raise ExchangeError(
                f"endpoint OAuth retornou status {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _parse_token_response(self, response: httpx.Response) -> DelegatedCredential:
        try:
            body = response.json()
            access_token = body["access_token"]
            expires_in = int(body["expires_in"])
            token_type = body.get("token_type") or "Bearer"
        except (ValueError, KeyError, TypeError) as exc:
            self._log_exchange_error(status_code=response.status_code, error_type="invalid_body")
            raise ExchangeError("resposta do endpoint OAuth inválida") from exc

        if not access_token:
            self._log_exchange_error(status_code=response.status_code, error_type="empty_token")
            raise ExchangeError("resposta do endpoint OAuth sem access_token")

        if expires_in <= 0:
            self._log_exchange_error(
                status_code=response.status_code, error_type="invalid_expires_in"
            )
            raise ExchangeError("resposta do endpoint OAuth com expires_in inválido")

        now = datetime.fromtimestamp(self._clock(), tz=UTC)
        return DelegatedCredential(
            access_token=str(access_token),
            token_type=str(token_type),
            expires_at=now + timedelta(seconds=expires_in),
            subject=self._delegated_user_email,
        )

    def _log_exchange_error(self, *, status_code: int | None, error_type: str) -> None:
        logger.error(
            "oauth_token_exchange_failed",
            extra={
                "component": _COMPONENT,
                "action": "exchange",
                "result": "error",
                "status_code": status_code,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )
