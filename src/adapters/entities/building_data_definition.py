"""Servicio REST: definiciones de datos de edificio (`/api/building-data-definitions`)."""

from __future__ import annotations

from core.domain.models import BuildingDataDefinition
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

COLLECTION = "building-data-definitions"


def building_data_definition_service(
    transport: Transport,
    api_url: str,
) -> EntityService[BuildingDataDefinition]:
    return EntityService.for_collection(transport, BuildingDataDefinition, api_url, COLLECTION)
