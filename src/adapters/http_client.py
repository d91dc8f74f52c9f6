"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y autenticación para todos los servicios.
- Traduce respuestas no-2xx y fallos de red a la taxonomía de `core.errors`.
- Facilita testeo: se puede construir sobre `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from core.config import AppSettings
from core.domain.http import RawResponse
from core.errors import TransportError, error_for_status
from core.interfaces.transport import QueryParams

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults para el API JSON.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los servicios se comporten igual.
    - `transport` permite inyectar un `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.auth_token:
        headers["Authorization"] = f"Bearer {settings.auth_token}"
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.json()
    return response.text


def _error_message(response: httpx.Response, body: Any) -> str:
    if isinstance(body, dict):
        for key in ("detail", "title", "message"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return response.reason_phrase or f"HTTP {response.status_code}"


class HttpxTransport:
    """Implementación de `core.interfaces.transport.Transport` sobre httpx."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxTransport":
        return cls(build_async_client(settings, transport=transport))

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        try:
            response = await self._client.request(
                method,
                url,
                json=json,
                params=list(params) if params else None,
                headers=dict(headers) if headers else None,
            )
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url}: {exc}") from exc

        body = _decode_body(response)
        response_headers = dict(response.headers)
        if not response.is_success:
            logger.info("%s %s -> %s", method, url, response.status_code)
            raise error_for_status(
                response.status_code,
                _error_message(response, body),
                headers=response_headers,
                body=body,
            )
        return RawResponse(status_code=response.status_code, headers=response_headers, body=body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
