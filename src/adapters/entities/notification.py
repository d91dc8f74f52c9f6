"""Servicio REST: notificaciones (`/api/notifications`).

Personaliza la costura `convert`: el servidor espera `date` en ISO-8601 UTC
con sufijo `Z`. La lectura queda en manos del modelo.
"""

from __future__ import annotations

from typing import Any

from adapters.entities.date_utils import to_server_datetime
from core.domain.models import Notification
from core.interfaces.transport import Transport
from core.services.entity_service import EntityService

COLLECTION = "notifications"


class NotificationService(EntityService[Notification]):
    def convert(self, entity: Notification) -> dict[str, Any]:
        payload = super().convert(entity)
        payload["date"] = to_server_datetime(entity.date)
        return payload


def notification_service(transport: Transport, api_url: str) -> NotificationService:
    return NotificationService.for_collection(transport, Notification, api_url, COLLECTION)
