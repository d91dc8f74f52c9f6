"""Cableado del cliente: un transporte, un bus de eventos, un servicio por entidad.

Por qué aquí:
- El bus se crea una sola vez al arrancar y vive lo que el proceso.
- Diálogos y vistas lo reciben explícitamente, sin tocar un global.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from adapters.entities import build_entity_services
from adapters.http_client import HttpxTransport
from core.config import AppSettings
from core.interfaces.transport import Transport
from core.services.dialog import EntityDialog, PopupCoordinator
from core.services.entity_service import EntityService
from core.services.event_bus import EventManager
from core.services.routing import ActivatedRoute
from core.services.views import EntityDetailView, EntityListView

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Contenedor de los colaboradores de larga vida del cliente de administración."""

    settings: AppSettings
    transport: Transport
    events: EventManager = field(default_factory=EventManager)
    services: dict[str, EntityService] = field(default_factory=dict)

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings | None = None,
        *,
        transport: Transport | None = None,
    ) -> "Application":
        settings = settings or AppSettings()
        transport = transport or HttpxTransport.from_settings(settings)
        services = build_entity_services(transport, settings.api_url)
        logger.debug("application ready: %s (%d entities)", settings.api_url, len(services))
        return cls(settings=settings, transport=transport, services=services)

    @property
    def entity_names(self) -> list[str]:
        return sorted(self.services)

    def service(self, entity_name: str) -> EntityService:
        try:
            return self.services[entity_name]
        except KeyError:
            known = ", ".join(self.entity_names)
            raise KeyError(f"unknown entity {entity_name!r} (known: {known})") from None

    def dialog(self, entity_name: str) -> EntityDialog:
        return EntityDialog(self.service(entity_name), self.events)

    def popup(self, entity_name: str, route: ActivatedRoute) -> PopupCoordinator:
        return PopupCoordinator(route, lambda: self.dialog(entity_name))

    def detail_view(self, entity_name: str, route: ActivatedRoute) -> EntityDetailView:
        return EntityDetailView(self.service(entity_name), self.events, route)

    def list_view(self, entity_name: str, **options) -> EntityListView:
        options.setdefault("items_per_page", self.settings.items_per_page)
        return EntityListView(self.service(entity_name), self.events, **options)

    async def aclose(self) -> None:
        close = getattr(self.transport, "aclose", None)
        if close is not None:
            await close()
