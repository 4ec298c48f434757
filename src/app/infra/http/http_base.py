"""Cliente HTTP base para chamadas ao OAuth e à Gmail API.

Sem retry: cada chamada é uma tentativa única e a falha sobe ao chamador.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx



@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP."""

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpClient:
    """Cliente HTTP simples sobre httpx.AsyncClient.

    Um `transport` pode ser injetado (ex.: httpx.MockTransport em testes).
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=self._config.verify_ssl,
            timeout=self._config.timeout_seconds,
            transport=self._transport,
        )

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        return {**self._config.default_headers, **(headers or {})}

    async def post_json(
        self,
        url: str,
        json: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        async with self._client() as client:
            return await client.post(url, json=json, headers=self._headers(headers))

    async def post_form(
        self,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        async with self._client() as client:
            return await client.post(url, data=data, headers=self._headers(headers))
