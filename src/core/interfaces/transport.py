"""Contrato del transporte HTTP.

Por qué Protocol:
- El Core no depende de httpx: cualquier cliente que entregue status, headers
  y cuerpo parseado sirve (adaptador httpx en producción, fakes en tests).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from core.domain.http import RawResponse

QueryParams = Sequence[tuple[str, str]]


@runtime_checkable
class Transport(Protocol):
    """Cliente request/response fiable.

    Reglas de diseño:
    - `request` es asíncrono porque hace I/O.
    - Una respuesta no-2xx se eleva como `core.errors.HttpStatusError`.
    - Un fallo de red se eleva como `core.errors.TransportError`.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: QueryParams | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RawResponse:
        ...
