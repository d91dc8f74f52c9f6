"""Vistas de detalle y listado (consumidores de solo lectura).

Reglas:
- Al activarse cargan vía el servicio y se suscriben al evento de cambio de
  su entidad; ante una notificación repiten la misma carga (recarga completa,
  no parche incremental).
- Al desactivarse liberan la suscripción a la ruta y al bus.
- Una respuesta que llega tras la desactivación se descarta, igual que la de
  una carga que otra más reciente ya dejó obsoleta (contador `_generation`).
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, TypeVar

from core.domain.models import BaseEntity
from core.services.entity_service import EntityService
from core.services.event_bus import Event, EventManager, modification_event
from core.services.lifecycle import Component
from core.services.request_options import sort_spec
from core.services.routing import ActivatedRoute, route_id

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseEntity)


class EntityDetailView(Component, Generic[E]):
    """Muestra una entidad identificada por el `id` de la ruta."""

    def __init__(
        self,
        service: EntityService[E],
        events: EventManager,
        route: ActivatedRoute,
        *,
        event_name: str | None = None,
    ) -> None:
        super().__init__()
        self._service = service
        self._events = events
        self._route = route
        self.event_name = event_name or modification_event(service.entity_name)
        self.entity: E | None = None
        self._entity_id: int | None = None
        self._generation = 0

    def activate(self) -> None:
        self.alive = True
        self.own(self._route.subscribe(self._on_params))
        self.own(self._events.subscribe(self.event_name, self._on_change))

    def _on_params(self, params: Mapping[str, Any]) -> None:
        entity_id = route_id(params)
        if entity_id is not None:
            self.spawn(self.load(entity_id))

    def _on_change(self, event: Event) -> None:
        entity_id = self.entity.id if self.entity is not None else self._entity_id
        if entity_id is not None:
            self.spawn(self.load(entity_id))

    async def load(self, entity_id: int) -> E | None:
        self._entity_id = entity_id
        self._generation += 1
        generation = self._generation
        response = await self._service.find(entity_id)
        if not self.alive:
            logger.debug("dropping %s %s: view deactivated", self._service.entity_name, entity_id)
            return None
        if generation != self._generation:
            logger.debug("dropping %s %s: superseded", self._service.entity_name, entity_id)
            return None
        self.entity = response.body
        return self.entity

    def deactivate(self) -> None:
        self.alive = False
        self.release_all()


class EntityListView(Component, Generic[E]):
    """Listado paginado y ordenable, con búsqueda opcional."""

    def __init__(
        self,
        service: EntityService[E],
        events: EventManager,
        *,
        items_per_page: int = 20,
        predicate: str = "id",
        ascending: bool = True,
        event_name: str | None = None,
    ) -> None:
        super().__init__()
        self._service = service
        self._events = events
        self.event_name = event_name or modification_event(service.entity_name)
        self.items_per_page = items_per_page
        self.predicate = predicate
        self.ascending = ascending
        self.page = 0
        self.items: list[E] = []
        self.total_items: int | None = None
        self.links: dict[str, int] = {}
        self.current_search: str | None = None
        self._generation = 0

    def activate(self) -> None:
        self.alive = True
        self.own(self._events.subscribe(self.event_name, self._on_change))
        self.spawn(self.load_all())

    def _on_change(self, event: Event) -> None:
        self.spawn(self.load_all())

    def _request(self) -> dict[str, Any]:
        req: dict[str, Any] = {
            "page": self.page,
            "size": self.items_per_page,
            "sort": sort_spec(self.predicate, self.ascending),
        }
        if self.current_search:
            req["query"] = self.current_search
        return req

    async def load_all(self) -> list[E]:
        req = self._request()
        self._generation += 1
        generation = self._generation
        if self.current_search:
            response = await self._service.search(req)
        else:
            response = await self._service.query(req)
        if not self.alive:
            logger.debug("dropping %s page: view deactivated", self._service.entity_name)
            return []
        if generation != self._generation:
            logger.debug("dropping %s page: superseded", self._service.entity_name)
            return self.items
        self.items = list(response.body or [])
        self.total_items = response.total_count
        self.links = response.links
        return self.items

    async def load_page(self, page: int) -> list[E]:
        self.page = page
        return await self.load_all()

    async def sort_by(self, predicate: str, ascending: bool = True) -> list[E]:
        self.predicate = predicate
        self.ascending = ascending
        self.page = 0
        return await self.load_all()

    async def search(self, query: str) -> list[E]:
        if not query:
            return await self.clear_search()
        self.current_search = query
        self.page = 0
        return await self.load_all()

    async def clear_search(self) -> list[E]:
        self.current_search = None
        self.page = 0
        return await self.load_all()

    @staticmethod
    def track_id(item: E) -> int | None:
        return item.id

    def deactivate(self) -> None:
        self.alive = False
        self.release_all()
