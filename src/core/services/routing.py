"""Fuente de parámetros de ruta (frontera con el router de la UI)."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from core.services.event_bus import EventManager, Subscription

ParamsHandler = Callable[[Mapping[str, Any]], None]

_PARAMS = "params"


class ActivatedRoute:
    """Mapa de parámetros observable.

    `subscribe` entrega primero los parámetros actuales y después cada
    `navigate`. El handle devuelto se libera como cualquier suscripción del bus.
    """

    def __init__(self, params: Mapping[str, Any] | None = None) -> None:
        self._params: dict[str, Any] = dict(params or {})
        self._emitter = EventManager()

    @property
    def params(self) -> Mapping[str, Any]:
        return dict(self._params)

    def subscribe(self, handler: ParamsHandler) -> Subscription:
        subscription = self._emitter.subscribe(_PARAMS, lambda event: handler(event.content))
        handler(self.params)
        return subscription

    def navigate(self, params: Mapping[str, Any]) -> None:
        self._params = dict(params)
        self._emitter.broadcast(_PARAMS, self.params)

    @property
    def observer_count(self) -> int:
        return self._emitter.subscriber_count(_PARAMS)


def route_id(params: Mapping[str, Any]) -> int | None:
    """Extrae el `id` de los parámetros (los routers lo entregan como string)."""

    value = params.get("id")
    if value is None or value == "":
        return None
    return int(value)


__all__ = ["ActivatedRoute", "route_id"]
