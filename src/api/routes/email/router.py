"""Endpoint de envio de email via Gmail API.

Endpoints:
- POST /       (compatível com o entrypoint de Cloud Functions)
- POST /send

Respostas:
- 200 {"status": "sent", "id": "<gmail id>"}
- 400 JSON inválido, payload inválido ou freio de segurança
- 500 falha de configuração/autenticação ou de montagem MIME
- 502 erro da Gmail API no envio
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.bootstrap.clients import EmailServiceContext, create_email_service_context
from app.domain.email_request import EmailRequest
from app.observability import (
    correlation_id_from_headers,
    get_correlation_id,
    record_send_outcome,
    reset_correlation_id,
    set_correlation_id,
)
from config.settings import get_gmail_settings
from utils.errors import (
    AttachmentTooLargeError,
    BuildError,
    ConfigurationError,
    GmailApiError,
    LoopProtectionError,
    TokenProviderError,
)

logger = logging.getLogger(__name__)

router = APIRouter()

CORRELATION_RESPONSE_HEADER = "X-Correlation-ID"


def resolve_email_context(request: Request) -> EmailServiceContext:
    """Obtém o contexto do processo, criando-o na primeira requisição.

    Se o startup não conseguiu montar o contexto (ex.: ADC indisponível),
    cada requisição tenta de novo até conseguir.
    """
    context = getattr(request.app.state, "email_context", None)
    if context is None:
        context = create_email_service_context(get_gmail_settings())
        request.app.state.email_context = context
    return context


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(
        content={"detail": detail},
        status_code=status_code,
        headers={CORRELATION_RESPONSE_HEADER: get_correlation_id()},
    )


def _parse_request(raw_body: bytes) -> EmailRequest | None:
    try:
        return EmailRequest.model_validate(json.loads(raw_body))
    except (ValueError, ValidationError) as exc:
        logger.warning(
            "invalid_json_payload",
            extra={"error_type": type(exc).__name__, "correlation_id": get_correlation_id()},
        )
        return None


@router.post("/", response_model=None)
@router.post("/send", response_model=None)
async def send_email(request: Request) -> JSONResponse:
    """Recebe EmailRequest em JSON e envia pela conta delegada."""
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        email_request = _parse_request(await request.body())
        if email_request is None:
            return _error(status.HTTP_400_BAD_REQUEST, "Bad Request")

        campaign_id = email_request.campaign_id
        try:
            context = resolve_email_context(request)
            result = await context.send_email_use_case().execute(email_request)
        except LoopProtectionError as exc:
            record_send_outcome("blocked", campaign_id=campaign_id)
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except AttachmentTooLargeError as exc:
            record_send_outcome("blocked", campaign_id=campaign_id)
            return _error(status.HTTP_400_BAD_REQUEST, str(exc))
        except (ConfigurationError, TokenProviderError) as exc:
            logger.error(
                "failed_to_init_auth",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            record_send_outcome("auth_error", campaign_id=campaign_id)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Auth Configuration Error")
        except BuildError as exc:
            logger.error("mime_build_failed", extra={"error": str(exc)})
            record_send_outcome("build_error", campaign_id=campaign_id)
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Message Build Error")
        except GmailApiError as exc:
            logger.error(
                "upstream_send_failed",
                extra={
                    "recipient": email_request.recipient,
                    "status_code": exc.status_code,
                    "error": str(exc),
                },
            )
            record_send_outcome("upstream_error", campaign_id=campaign_id)
            return _error(status.HTTP_502_BAD_GATEWAY, "Upstream API Error")

        return JSONResponse(
            content={"status": "sent", "id": result.message_id},
            status_code=status.HTTP_200_OK,
            headers={CORRELATION_RESPONSE_HEADER: get_correlation_id()},
        )
    finally:
        reset_correlation_id(token)
