"""Servicios REST por entidad.

Por qué un paquete:
- Un módulo por entidad con su colección y, si hace falta, sus costuras de
  normalización propias.
- El resto usa `EntityService` tal cual; no hay N copias del CRUD.
"""

from __future__ import annotations

from typing import Callable

from adapters.entities.building import BuildingService, building_service
from adapters.entities.building_data_definition import building_data_definition_service
from adapters.entities.info import InfoService, info_service
from adapters.entities.info_definition import info_definition_service
from adapters.entities.notification import NotificationService, notification_service
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

ServiceFactory = Callable[[Transport, str], EntityService]

ENTITY_FACTORIES: dict[str, ServiceFactory] = {
    "building": building_service,
    "buildingDataDefinition": building_data_definition_service,
    "notification": notification_service,
    "info": info_service,
    "infoDefinition": info_definition_service,
}


def build_entity_services(transport: Transport, api_url: str) -> dict[str, EntityService]:
    return {name: factory(transport, api_url) for name, factory in ENTITY_FACTORIES.items()}


__all__ = [
    "BuildingService",
    "ENTITY_FACTORIES",
    "InfoService",
    "NotificationService",
    "build_entity_services",
    "building_data_definition_service",
    "building_service",
    "info_definition_service",
    "info_service",
    "notification_service",
]
