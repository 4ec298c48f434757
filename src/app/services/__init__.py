"""Serviços de aplicação.

Unidades reutilizáveis sem IO direto: montagem MIME, sanitização e
freios de segurança. Implementações concretas de IO ficam em app/infra/.
"""

from app.services.html_sanitizer import (
    HtmlSanitizationPolicy,
    SanitizationPolicyRegistry,
    security_policy,
)
from app.services.mime_builder import build_mime
from app.services.safety_brakes import apply_safety_brakes

__all__ = [
    "HtmlSanitizationPolicy",
    "SanitizationPolicyRegistry",
    "apply_safety_brakes",
    "build_mime",
    "security_policy",
]
