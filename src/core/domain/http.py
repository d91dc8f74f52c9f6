"""Sobre de respuesta (status + headers + body) y helpers de paginación.

Por qué un sobre propio:
- Los servicios devuelven el contexto HTTP junto al cuerpo ya normalizado,
  sin exponer el tipo de respuesta del transporte (httpx) al resto del Core.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, Generic, Mapping, TypeVar

T = TypeVar("T")
U = TypeVar("U")

_LINK_RE = re.compile(r'<([^>]*)>\s*;\s*rel="([^"]+)"')
_PAGE_RE = re.compile(r"[?&]page=(\d+)")


@dataclass(frozen=True)
class RawResponse:
    """Lo que entrega un `Transport`: status, headers y JSON ya parseado."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class EntityResponse(Generic[T]):
    """Respuesta normalizada que reciben los llamadores de un servicio."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: T | None = None

    def clone(self, *, body: U) -> "EntityResponse[U]":
        """Misma respuesta (status/headers) con otro cuerpo."""

        return replace(self, body=body)  # type: ignore[return-value]

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def total_count(self) -> int | None:
        return parse_total_count(self.headers)

    @property
    def links(self) -> dict[str, int]:
        return parse_links(self.header("link") or "")


def parse_total_count(headers: Mapping[str, str]) -> int | None:
    """Lee `X-Total-Count` (total de elementos del listado paginado)."""

    for key, value in headers.items():
        if key.lower() == "x-total-count":
            try:
                return int(value)
            except (TypeError, ValueError):
                return None
    return None


def parse_links(header: str) -> dict[str, int]:
    """Parsea un header `Link` (RFC 5988) a `{rel: page}`.

    Ejemplo:
    `</api/buildings?page=1&size=20>; rel="next",</api/buildings?page=0&size=20>; rel="first"`
    -> `{"next": 1, "first": 0}`
    """

    links: dict[str, int] = {}
    if not header:
        return links
    for url, rel in _LINK_RE.findall(header):
        match = _PAGE_RE.search(url)
        if match:
            links[rel] = int(match.group(1))
    return links
