"""Cliente HTTP base para integrações externas."""

from app.infra.http.http_base import HttpClient, HttpClientConfig

__all__ = ["HttpClient", "HttpClientConfig"]
