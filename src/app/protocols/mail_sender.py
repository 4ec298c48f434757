"""Contrato do cliente de envio e rotulagem de mensagens."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MailSenderProtocol(Protocol):
    """Operações mínimas da API de email usadas pelo caso de uso."""

    async def send_raw(self, access_token: str, raw_message: bytes) -> str:
        """Envia a mensagem MIME e retorna o id atribuído pelo provedor."""
        ...

    async def modify_labels(
        self,
        access_token: str,
        message_id: str,
        add_label_ids: list[str],
    ) -> None:
        """Aplica labels a uma mensagem já enviada."""
        ...
