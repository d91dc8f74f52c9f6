"""Servicio REST: definiciones de info (`/api/info-definitions`)."""

from __future__ import annotations

from core.domain.models import InfoDefinition
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

COLLECTION = "info-definitions"


def info_definition_service(transport: Transport, api_url: str) -> EntityService[InfoDefinition]:
    return EntityService.for_collection(transport, InfoDefinition, api_url, COLLECTION)
