"""Modelos de domínio para a requisição de envio de email.

Os nomes de campos JSON seguem o contrato público do endpoint
(`body_html`, `content_b64`, `request_read_receipt`, `label_ids`).
Os modelos são imutáveis: a injeção do remetente gera uma cópia.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FORBIDDEN_HEADER_CHARS = ("\r", "\n")


def _ensure_single_line(value: str) -> str:
    if any(ch in value for ch in _FORBIDDEN_HEADER_CHARS):
        raise ValueError("valor de cabeçalho contém CR/LF")
    return value


class Attachment(BaseModel):
    """Anexo já codificado em base64 pelo chamador."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    filename: str = Field(..., description="Nome exibido do arquivo.")
    content_b64: str = Field(..., description="Conteúdo em base64 (newlines toleradas).")
    mime_type: str = Field(
        default="application/octet-stream",
        description="MIME type declarado do anexo.",
    )

    @field_validator("filename", "mime_type")
    @classmethod
    def _reject_header_injection(cls, value: str) -> str:
        # ambos são emitidos nos cabeçalhos da parte MIME
        return _ensure_single_line(value)


class EmailOptions(BaseModel):
    """Flags de pós-envio e recibo de leitura."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    starred: bool = False
    important: bool = False
    request_read_receipt: bool = False
    label_ids: list[str] = Field(default_factory=list)


class EmailRequest(BaseModel):
    """Requisição de envio recebida pelo endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    campaign_id: str = ""

    # from_address é injetado pelo serviço a partir da configuração
    from_address: str = Field(default="", exclude=True)
    sender_name: str = ""
    recipient: str = Field(..., min_length=1)
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    reply_to: str = ""

    subject: str = ""
    body_html: str = ""

    options: EmailOptions = Field(default_factory=EmailOptions)
    attachments: list[Attachment] = Field(default_factory=list)
    custom_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("custom_headers")
    @classmethod
    def _reject_header_injection(cls, value: dict[str, str]) -> dict[str, str]:
        for name, header_value in value.items():
            if not name or ":" in name:
                raise ValueError(f"nome de cabeçalho inválido: {name!r}")
            if any(ch in name or ch in header_value for ch in _FORBIDDEN_HEADER_CHARS):
                raise ValueError(f"cabeçalho {name!r} contém CR/LF")
        return value

    @field_validator("recipient", "reply_to", "sender_name", "subject")
    @classmethod
    def _reject_line_breaks(cls, value: str) -> str:
        return _ensure_single_line(value)

    @field_validator("cc", "bcc")
    @classmethod
    def _reject_line_breaks_in_addresses(cls, value: list[str]) -> list[str]:
        for address in value:
            _ensure_single_line(address)
        return value

    @property
    def attachments_size(self) -> int:
        """Tamanho agregado do conteúdo base64 dos anexos."""
        return sum(len(attachment.content_b64) for attachment in self.attachments)

    def with_sender(self, from_address: str) -> EmailRequest:
        """Retorna cópia com o remetente configurado."""
        return self.model_copy(update={"from_address": from_address})


__all__ = ["Attachment", "EmailOptions", "EmailRequest"]
