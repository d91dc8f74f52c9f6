"""Traducción de opciones de listado a query params.

Solo se serializan las claves reconocidas (`page`, `size`, `sort`, `query`);
el resto se ignora en silencio.
"""

from __future__ import annotations

from typing import Any, Mapping

RECOGNIZED_KEYS: tuple[str, ...] = ("page", "size", "sort", "query")


def _as_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def create_request_option(req: Mapping[str, Any] | None = None) -> list[tuple[str, str]]:
    """Construye los params de un `GET` de listado.

    - `sort` acepta un string o una lista; se emite un `sort=` por entrada.
    - Valores `None` no se serializan.
    """

    params: list[tuple[str, str]] = []
    if not req:
        return params

    for key in RECOGNIZED_KEYS:
        value = req.get(key)
        if value is None:
            continue
        if key == "sort" and isinstance(value, (list, tuple)):
            for item in value:
                params.append(("sort", _as_param(item)))
            continue
        params.append((key, _as_param(value)))
    return params


def sort_spec(predicate: str, ascending: bool = True, *, secondary: str | None = "id") -> list[str]:
    """Especificación `sort` estilo `campo,asc|desc` con orden secundario por id."""

    direction = "asc" if ascending else "desc"
    result = [f"{predicate},{direction}"]
    if secondary and secondary != predicate:
        result.append(secondary)
    return result
