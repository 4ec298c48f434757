"""Rotas HTTP da API.

- routes/email/: envio de email (POST / e POST /send)
- routes/health/: health checks e readiness
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
