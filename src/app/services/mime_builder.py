"""Montagem da mensagem MIME multipart/mixed a partir de EmailRequest.

Estrutura produzida (CRLF em todas as linhas):

    <cabeçalhos>
    <linha vazia>
    --<boundary>
    Content-Type: text/html; charset=UTF-8
    <linha vazia>
    <html sanitizado>
    --<boundary>            (um bloco por anexo, na ordem recebida)
    ...
    --<boundary>--

Cabeçalhos customizados são emitidos como recebidos; a rejeição de CR/LF
acontece na validação do EmailRequest.
"""

from __future__ import annotations

import logging
import secrets
from email.header import Header
from typing import TYPE_CHECKING

from app.constants.email import (
    DEFAULT_SENDER,
    DISPOSITION_ATTACHMENT,
    ENCODING_BASE64,
    MIME_MULTIPART_MIXED,
    MIME_TEXT_HTML_UTF8,
    MIME_VERSION,
    EmailHeader,
)
from app.services.html_sanitizer import security_policy
from utils.errors import BuildError

if TYPE_CHECKING:
    from app.domain.email_request import Attachment, EmailRequest
    from app.services.html_sanitizer import HtmlSanitizationPolicy, SanitizationPolicyRegistry

logger = logging.getLogger(__name__)

CRLF = "\r\n"


def generate_boundary() -> str:
    return secrets.token_hex(30)


def _encode_words(value: str) -> str:
    """Aplica RFC 2047 apenas quando o valor não é ASCII."""
    if value.isascii():
        return value
    return Header(value, "utf-8").encode(linesep=CRLF)


def _header(name: str, value: str) -> str:
    return f"{name}: {value}{CRLF}"


def format_from(sender_name: str, from_address: str) -> str:
    address = from_address or DEFAULT_SENDER
    if not sender_name:
        return address
    if sender_name.isascii():
        escaped = sender_name.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}" <{address}>'
    return f"{_encode_words(sender_name)} <{address}>"


def _header_block(request: EmailRequest, boundary: str) -> str:
    from_address = request.from_address or DEFAULT_SENDER
    lines = [_header(EmailHeader.FROM, format_from(request.sender_name, from_address))]
    lines.append(_header(EmailHeader.TO, request.recipient))

    if request.cc:
        lines.append(_header(EmailHeader.CC, ", ".join(request.cc)))
    if request.bcc:
        lines.append(_header(EmailHeader.BCC, ", ".join(request.bcc)))
    if request.reply_to:
        lines.append(_header(EmailHeader.REPLY_TO, request.reply_to))

    lines.append(_header(EmailHeader.SUBJECT, _encode_words(request.subject)))
    lines.append(_header(EmailHeader.MIME_VERSION, MIME_VERSION))
    lines.append(
        _header(EmailHeader.CONTENT_TYPE, f"{MIME_MULTIPART_MIXED}; boundary={boundary}")
    )

    if request.options.request_read_receipt:
        lines.append(_header(EmailHeader.READ_RECEIPT, from_address))

    for name, value in request.custom_headers.items():
        lines.append(_header(name, value))

    return "".join(lines)


def _attachment_part(attachment: Attachment) -> str:
    filename = attachment.filename.replace("\\", "\\\\").replace('"', '\\"')
    content = attachment.content_b64.replace("\r", "").replace("\n", "")
    return (
        _header(EmailHeader.CONTENT_TYPE, attachment.mime_type)
        + _header(EmailHeader.TRANSFER_ENCODING, ENCODING_BASE64)
        + _header(EmailHeader.DISPOSITION, f'{DISPOSITION_ATTACHMENT}; filename="{filename}"')
        + CRLF
        + content
    )


def _assemble(
    request: EmailRequest,
    boundary: str,
    policy: HtmlSanitizationPolicy,
) -> bytes:
    safe_body = policy.sanitize(request.body_html)

    delimiter = f"--{boundary}"
    parts = [_header(EmailHeader.CONTENT_TYPE, MIME_TEXT_HTML_UTF8) + CRLF + safe_body]
    parts.extend(_attachment_part(attachment) for attachment in request.attachments)

    message = (
        _header_block(request, boundary)
        + CRLF
        + delimiter
        + CRLF
        + f"{CRLF}{delimiter}{CRLF}".join(parts)
        + f"{CRLF}{delimiter}--{CRLF}"
    )
    return message.encode("utf-8")


def build_mime(
    request: EmailRequest,
    *,
    boundary: str | None = None,
    policy_registry: SanitizationPolicyRegistry | None = None,
) -> bytes:
    """Serializa o EmailRequest em bytes RFC 2822 / MIME.

    Args:
        request: Requisição já validada (remetente injetado).
        boundary: Token de boundary; gerado aleatoriamente se None.
        policy_registry: Registro de políticas de sanitização por campanha.

    Returns:
        Mensagem completa pronta para base64url.

    Raises:
        BuildError: Apenas em falhas de encoding (ex.: surrogates isolados
            no corpo, no assunto ou em cabeçalhos).
    """
    boundary = boundary or generate_boundary()
    policy = security_policy(request.campaign_id, policy_registry)

    try:
        raw = _assemble(request, boundary, policy)
    except UnicodeError as exc:
        logger.error(
            "mime_build_failed",
            extra={"campaign_id": request.campaign_id, "error_type": type(exc).__name__},
        )
        raise BuildError("falha de encoding ao montar mensagem MIME") from exc

    logger.debug(
        "mime_built",
        extra={
            "campaign_id": request.campaign_id,
            "policy": policy.name,
            "attachment_count": len(request.attachments),
            "size_bytes": len(raw),
        },
    )
    return raw
