"""Freios de segurança aplicados antes de autenticar e montar a mensagem."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from utils.errors import AttachmentTooLargeError, LoopProtectionError

if TYPE_CHECKING:
    from app.domain.email_request import EmailRequest
    from config.settings.gmail import GmailSettings

logger = logging.getLogger(__name__)


def check_loop_protection(request: EmailRequest, settings: GmailSettings) -> None:
    """Impede envio para a própria conta delegada ou para o alias."""
    recipient = request.recipient.strip().lower()
    blocked = {
        address.strip().lower()
        for address in (settings.delegated_user_email, settings.alias_user_email)
        if address
    }
    if recipient in blocked:
        logger.warning(
            "safety_brake_loop_blocked",
            extra={
                "component": "safety_brakes",
                "campaign_id": request.campaign_id,
                "correlation_id": get_correlation_id(),
            },
        )
        raise LoopProtectionError("Safety Block: Cannot send to self")


def check_attachment_size(request: EmailRequest, settings: GmailSettings) -> None:
    """Limita o tamanho agregado do conteúdo base64 dos anexos."""
    total_size = request.attachments_size
    if total_size > settings.max_attachment_b64_bytes:
        logger.warning(
            "safety_brake_attachments_too_large",
            extra={
                "component": "safety_brakes",
                "size_bytes": total_size,
                "limit_mb": settings.max_total_size_mb,
                "correlation_id": get_correlation_id(),
            },
        )
        raise AttachmentTooLargeError("Attachments exceed size limit", size_bytes=total_size)


def apply_safety_brakes(request: EmailRequest, settings: GmailSettings) -> None:
    check_loop_protection(request, settings)
    check_attachment_size(request, settings)
