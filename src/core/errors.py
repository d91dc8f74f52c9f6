"""Taxonomía de errores del cliente.

Reglas:
- Todos los fallos suben al llamador inmediato; aquí no hay reintentos.
- Los errores HTTP conservan status, headers y cuerpo para que la capa de
  presentación decida qué mostrar.
"""

from __future__ import annotations

from typing import Any, Mapping


class HolocampusError(Exception):
    """Base de todos los errores del cliente."""


class TransportError(HolocampusError):
    """Fallo de red: el servidor no respondió (DNS, conexión, timeout)."""


class HttpStatusError(HolocampusError):
    """Respuesta no-2xx del servidor."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.headers = dict(headers or {})
        self.body = body

    @property
    def error_key(self) -> str | None:
        """Clave de error que el servidor adjunta en `X-<app>-error` (si existe)."""

        for key, value in self.headers.items():
            if key.lower().endswith("-error"):
                return value
        if isinstance(self.body, dict):
            value = self.body.get("errorKey") or self.body.get("message")
            if isinstance(value, str):
                return value
        return None

    def __str__(self) -> str:
        return f"HTTP {self.status_code}: {self.message}"


class BadRequestError(HttpStatusError):
    """Validación rechazada por el servidor (400/422)."""


class ConflictError(HttpStatusError):
    """Conflicto con el estado del servidor (409)."""


class NotFoundError(HttpStatusError):
    """El identificador no existe en el servidor (404)."""


class ServiceError(HolocampusError):
    """Uso incorrecto de un servicio (p.ej. búsqueda sin endpoint)."""


class DialogStateError(HolocampusError):
    """Transición ilegal en la máquina de estados del diálogo."""


_STATUS_ERRORS: dict[int, type[HttpStatusError]] = {
    400: BadRequestError,
    404: NotFoundError,
    409: ConflictError,
    422: BadRequestError,
}


def error_for_status(
    status_code: int,
    message: str,
    *,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
) -> HttpStatusError:
    """Construye la excepción adecuada para un status HTTP no-2xx."""

    cls = _STATUS_ERRORS.get(status_code, HttpStatusError)
    return cls(status_code, message, headers=headers, body=body)
