"""Servicio REST: infos (`/api/infos`)."""

from __future__ import annotations

from typing import Any

from adapters.entities.date_utils import to_server_datetime
from core.domain.models import Info
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

COLLECTION = "infos"


class InfoService(EntityService[Info]):
    def convert(self, entity: Info) -> dict[str, Any]:
        payload = super().convert(entity)
        payload["date"] = to_server_datetime(entity.date)
        return payload


def info_service(transport: Transport, api_url: str) -> InfoService:
    return InfoService.for_collection(transport, Info, api_url, COLLECTION)
