"""Ciclo de vida compartido por vistas y popups.

Por qué una base común:
- Toda pieza de UI que se suscribe (ruta, bus) debe liberar sus handles al
  desactivarse, pase lo que pase.
- Las respuestas pueden llegar después de la desactivación: `alive` permite
  descartarlas en vez de mutar estado muerto.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine

from core.services.event_bus import Subscription

logger = logging.getLogger(__name__)


class Component:
    def __init__(self) -> None:
        self.alive = False
        self._subscriptions: list[Subscription] = []
        self._tasks: set[asyncio.Task[Any]] = set()

    def own(self, subscription: Subscription) -> Subscription:
        """Registra un handle para liberarlo en `release_all`."""

        self._subscriptions.append(subscription)
        return subscription

    def release_all(self) -> None:
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.unsubscribe()

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
        """Lanza trabajo asíncrono desde un callback síncrono (bus, ruta)."""

        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("%s: background task failed: %s", type(self).__name__, exc)

    async def pending(self) -> None:
        """Espera a que termine el trabajo lanzado con `spawn`."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)
