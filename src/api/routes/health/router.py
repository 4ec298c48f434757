"""Endpoints de health check para Cloud Run."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.bootstrap import collect_settings_errors
from config.settings import get_base_settings

router = APIRouter()


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=get_base_settings().service_name,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: settings válidas e estado do cache de credencial.

    O token não é obtido aqui; um cache vazio não impede o readiness.
    """
    errors = collect_settings_errors()
    context = getattr(request.app.state, "email_context", None)
    credential = context.credential_cache.current if context is not None else None

    payload = {
        "status": "ready" if not errors else "not_ready",
        "checks": {
            "settings": {"status": "ok" if not errors else "failed", "error_count": len(errors)},
            "email_context": {"status": "ok" if context is not None else "not_initialized"},
            "credential": {
                "status": "cached" if credential is not None else "empty",
                "expires_at": credential.expires_at.isoformat() if credential else None,
            },
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if not errors else 503)
