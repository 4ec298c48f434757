"""Gerenciamento de correlation_id para rastreamento de requisições.

O correlation_id vem do header X-Correlation-ID ou, no Cloud Run, do
trace id em X-Cloud-Trace-Context. Usa ContextVar para ser async-safe.

Uso:
    token = set_correlation_id(correlation_id_from_headers(request.headers))
    try:
        # processar request
    finally:
        reset_correlation_id(token)
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from contextvars import ContextVar, Token

CORRELATION_HEADER = "x-correlation-id"
CLOUD_TRACE_HEADER = "x-cloud-trace-context"

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual (vazio se não definido)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id no contexto atual; gera UUID se None."""
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def correlation_id_from_headers(headers: Mapping[str, str]) -> str | None:
    """Extrai correlation_id dos headers HTTP.

    X-Cloud-Trace-Context tem o formato TRACE_ID/SPAN_ID;o=OPTIONS,
    e apenas o TRACE_ID é usado.
    """
    explicit = headers.get(CORRELATION_HEADER)
    if explicit:
        return explicit.strip()
    trace = headers.get(CLOUD_TRACE_HEADER)
    if trace:
        trace_id = trace.split("/", 1)[0].strip()
        return trace_id or None
    return None
