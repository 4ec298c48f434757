"""Entrypoint do serviço de envio de email (Gmail DWD).

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 8080

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 8080

Cloud Run:
    O container deve expor a porta definida em PORT (padrão 8080).
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from api.routes import create_api_router
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import create_email_service_context
from config.logging import get_logger
from config.settings import get_base_settings, get_gmail_settings
from utils.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup: valida settings e monta o contexto de envio (clientes + cache).
    Se o contexto não puder ser montado, a primeira requisição tenta de novo.
    """
    service_name = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service_name})
    validate_runtime_settings()
    app.state.email_context = None

    try:
        app.state.email_context = create_email_service_context(get_gmail_settings())
    except ConfigurationError as exc:
        logger.warning(
            "email_context_not_ready",
            extra={"error_type": type(exc).__name__, "error": str(exc)},
        )

    yield

    logger.info("app_shutting_down", extra={"service": service_name})


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI."""
    fastapi_app = FastAPI(
        title="Gmail DWD Handler",
        description="Envio de email via Gmail API com Domain-Wide Delegation keyless",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})
    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    port = int(os.getenv("PORT", "8080"))
    logger.info("Starting gmail handler in development mode", extra={"port": port})
    uvicorn.run("app.app:app", host="0.0.0.0", port=port, reload=True)


if __name__ == "__main__":
    main()
