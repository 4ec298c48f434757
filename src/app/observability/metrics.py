"""Métricas via structured logging.

Registradas como logs estruturados para agregação posterior
(Cloud Logging log-based metrics, BigQuery).

Uso:
    from app.observability import record_latency, record_send_outcome

    start = time.perf_counter()
    # ... operação ...
    record_latency("send_email", "gmail_send", (time.perf_counter() - start) * 1000)
    record_send_outcome("sent", campaign_id="promo-01")
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "send_email")
        operation: Nome da operação (ex: "acquire_token", "gmail_send")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_send_outcome(
    outcome: str,
    *,
    campaign_id: str = "",
    correlation_id: str | None = None,
) -> None:
    """Registra resultado de um envio (sent, blocked, auth_error, build_error, upstream_error)."""
    logger.info(
        "metric_send_outcome",
        extra={
            "metric_type": "send_outcome",
            "component": "send_email",
            "outcome": outcome,
            "campaign_id": campaign_id,
            "correlation_id": correlation_id,
        },
    )
