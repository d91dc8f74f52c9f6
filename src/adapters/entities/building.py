"""Servicio REST: edificios (`/api/buildings`).

Además del CRUD genérico expone la vista "mapping" del edificio
(`GET /api/buildings/{id}/mapping`).
"""

from __future__ import annotations

import logging

from core.domain.http import EntityResponse
from core.domain.models import Building
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

logger = logging.getLogger(__name__)

COLLECTION = "buildings"


class BuildingService(EntityService[Building]):
    async def find_mapping(self, entity_id: int) -> EntityResponse[Building]:
        logger.debug("REST request to get Building's mapping : %s", entity_id)
        raw = await self._transport.request("GET", f"{self.resource_url}/{entity_id}/mapping")
        return self.convert_response(raw)


def building_service(transport: Transport, api_url: str) -> BuildingService:
    return BuildingService.for_collection(transport, Building, api_url, COLLECTION)
