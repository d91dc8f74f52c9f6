"""Bus de notificaciones de cambio (publish/subscribe por nombre).

Por qué un bus:
- Desacopla la mutación (diálogo guarda) de la re-visualización (vistas
  recargan) sin un store compartido en memoria.

Reglas:
- Entrega síncrona, en orden de suscripción.
- Un handler liberado durante la entrega (por sí mismo o por otro) no se
  vuelve a invocar en esa misma publicación.
- `destroy`/`unsubscribe` es idempotente.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

ACK = "OK"


@dataclass(frozen=True)
class Event:
    name: str
    content: Any = None


Handler = Callable[[Event], None]


def modification_event(entity_name: str) -> str:
    """Nombre del evento de cambio de una entidad (`buildingListModification`)."""

    return f"{entity_name}ListModification"


class Subscription:
    """Handle devuelto por `subscribe`; lo libera quien lo creó."""

    def __init__(self, manager: "EventManager", name: str, handler: Handler) -> None:
        self._manager = manager
        self.name = name
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        self._manager.destroy(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        state = "active" if self.active else "released"
        return f"Subscription({self.name!r}, {state})"


class EventManager:
    """Registro de suscriptores por nombre de evento."""

    def __init__(self) -> None:
        self._subs: Dict[str, List[Subscription]] = {}

    def subscribe(self, name: str, handler: Handler) -> Subscription:
        if not name:
            raise ValueError("event name must be a non-empty string")
        subscription = Subscription(self, name, handler)
        self._subs.setdefault(name, []).append(subscription)
        return subscription

    def destroy(self, subscription: Subscription | None) -> None:
        if subscription is None or not subscription.active:
            return
        subscription.active = False
        subscriptions = self._subs.get(subscription.name)
        if not subscriptions:
            return
        try:
            subscriptions.remove(subscription)
        except ValueError:
            return
        if not subscriptions:
            del self._subs[subscription.name]

    unsubscribe = destroy

    def broadcast(self, name: str, content: Any = None) -> None:
        """Notifica a todos los suscriptores actuales de `name`.

        Si un handler falla, el resto sigue recibiendo el evento y el primer
        error se re-lanza al publicador al final de la entrega.
        """

        subscriptions = list(self._subs.get(name, ()))
        if not subscriptions:
            return
        logger.debug("broadcast %s to %d subscriber(s)", name, len(subscriptions))
        event = Event(name=name, content=content)
        first_error: Exception | None = None
        for subscription in subscriptions:
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception as exc:
                logger.exception("handler for %s failed", name)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    publish = broadcast

    def subscriber_count(self, name: str) -> int:
        return len(self._subs.get(name, ()))


_default_manager: EventManager | None = None


def get_event_manager() -> EventManager:
    """Bus de proceso, creado perezosamente en el primer uso y nunca destruido.

    El código nuevo debería recibir el bus inyectado (ver `Application`).
    """

    global _default_manager
    if _default_manager is None:
        _default_manager = EventManager()
    return _default_manager
