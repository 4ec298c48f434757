"""Assinatura keyless de JWT via IAM Credentials API.

O serviço autentica com Application Default Credentials (a identidade do
próprio Cloud Run/Function) e pede ao IAM que assine o claim set com as
chaves gerenciadas pelo Google da service account emissora.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import google.auth
from google.auth.exceptions import DefaultCredentialsError
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from app.constants.email import IAM_SERVICE_ACCOUNT_PATH
from app.observability import get_correlation_id
from app.protocols.jwt_signer import JwtSignerProtocol
from utils.errors import ConfigurationError, SigningError

logger = logging.getLogger(__name__)

_COMPONENT = "iam_jwt_signer"
_CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def http_status(exc: HttpError) -> int | None:
    response = getattr(exc, "resp", None)
    return int(response.status) if response and getattr(response, "status", None) else None


class IamCredentialsJwtSigner(JwtSignerProtocol):
    """Implementação do protocolo de assinatura usando projects.serviceAccounts.signJwt."""

    __slots__ = ("_service", "_service_account_email")

    def __init__(self, *, service_account_email: str, service: Any | None = None) -> None:
        self._service_account_email = service_account_email
        self._service = service if service is not None else self._build_service()

    @staticmethod
    def _build_service() -> Any:
        try:
            credentials, _ = google.auth.default(scopes=[_CLOUD_PLATFORM_SCOPE])
        except DefaultCredentialsError as exc:
            raise ConfigurationError("Application Default Credentials indisponíveis") from exc
        return build("iamcredentials", "v1", credentials=credentials, cache_discovery=False)

    @property
    def resource_name(self) -> str:
        return IAM_SERVICE_ACCOUNT_PATH.format(email=self._service_account_email)

    async def sign_jwt(self, payload: str) -> str:
        try:
            response = await asyncio.to_thread(self._sign_jwt_sync, payload)
        except HttpError as exc:
            status_code = http_status(exc)
            self._log_error(status_code=status_code, error_type=type(exc).__name__)
            raise SigningError(f"IAM signJwt retornou status {status_code}") from exc
        except Exception as exc:
            self._log_error(status_code=None, error_type=type(exc).__name__)
            raise SigningError("falha ao assinar JWT via IAM") from exc

        signed_jwt = response.get("signedJwt") if isinstance(response, dict) else None
        if not signed_jwt:
            self._log_error(status_code=None, error_type="missing_signed_jwt")
            raise SigningError("IAM signJwt não retornou signedJwt")

        logger.debug(
            "iam_jwt_signed",
            extra={
                "component": _COMPONENT,
                "key_id": response.get("keyId", ""),
                "correlation_id": get_correlation_id(),
            },
        )
        return str(signed_jwt)

    def _sign_jwt_sync(self, payload: str) -> dict[str, Any]:
        accounts = self._service.projects().serviceAccounts()
        return accounts.signJwt(name=self.resource_name, body={"payload": payload}).execute()

    def _log_error(self, *, status_code: int | None, error_type: str) -> None:
        logger.error(
            "iam_sign_jwt_failed",
            extra={
                "component": _COMPONENT,
                "action": "sign_jwt",
                "result": "error",
                "status_code": status_code,
                "error_type": error_type,
                "correlation_id": get_correlation_id(),
            },
        )
