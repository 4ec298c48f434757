"""Formatters de logging estruturado.

`levelname` é renomeado para `severity`, campo que o Cloud Logging usa
para classificar entradas JSON vindas de stdout.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "severity",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "asctime": "2026-10-19 10:30:00,123",
            "severity": "INFO",
            "logger": "app.use_cases.send_email",
            "message": "email_sent",
            "correlation_id": "abc-123",
            "service": "gmail_handler",
            "message_id": "18c2f..."
        }
    """
    format_string = " ".join(f"%({name})s" for name in REQUIRED_LOG_FIELDS)
    return JsonFormatter(format_string, rename_fields=FIELD_RENAME_MAP)
