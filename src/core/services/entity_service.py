"""Servicio genérico de entidad (CRUD + normalización).

Por qué un único servicio genérico:
- Cada entidad del API expone exactamente los mismos endpoints REST; basta con
  parametrizar {modelo, ruta de la colección} en vez de duplicar N clases.
- Las dos costuras de normalización (`convert_item_from_server` / `convert`)
  son el único punto de personalización por entidad.

Contrato:
- Toda respuesta pasa por `convert_item_from_server` exactamente una vez.
- Todo payload saliente pasa por `convert` exactamente una vez.
- Los errores del transporte llegan al llamador sin modificar (sin reintentos).
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Generic, Mapping, TypeVar

from core.domain.http import EntityResponse, RawResponse
from core.domain.models import BaseEntity
from core.errors import ServiceError
from core.interfaces.transport import Transport
from core.services.request_options import create_request_option

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseEntity)


class EntityService(Generic[E]):
    """CRUD REST para un tipo de entidad.

    `resource_url` es `<api>/<colección>` (p.ej. `http://host/api/buildings`);
    `search_url` es `<api>/_search/<colección>` cuando el servidor indexa la
    entidad.
    """

    def __init__(
        self,
        transport: Transport,
        model: type[E],
        resource_url: str,
        *,
        search_url: str | None = None,
        entity_name: str | None = None,
    ) -> None:
        self._transport = transport
        self.model = model
        self.resource_url = resource_url.rstrip("/")
        self.search_url = search_url.rstrip("/") if search_url else None
        self.entity_name = entity_name or _default_entity_name(model)

    @classmethod
    def for_collection(
        cls,
        transport: Transport,
        model: type[E],
        api_url: str,
        collection: str,
        *,
        searchable: bool = True,
        entity_name: str | None = None,
    ) -> "EntityService[E]":
        """Instancia el servicio para `<api_url>/<collection>`."""

        api_url = api_url.rstrip("/")
        return cls(
            transport,
            model,
            f"{api_url}/{collection}",
            search_url=f"{api_url}/_search/{collection}" if searchable else None,
            entity_name=entity_name,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.model.__name__}, {self.resource_url!r})"

    async def create(self, entity: E) -> EntityResponse[E]:
        logger.debug("REST request to save %s : %s", self.model.__name__, entity)
        if entity.id is not None:
            logger.debug("create() called with an existing id %s", entity.id)
        payload = self.convert(entity)
        raw = await self._transport.request("POST", self.resource_url, json=payload)
        return self.convert_response(raw)

    async def update(self, entity: E) -> EntityResponse[E]:
        logger.debug("REST request to update %s : %s", self.model.__name__, entity)
        payload = self.convert(entity)
        raw = await self._transport.request("PUT", self.resource_url, json=payload)
        return self.convert_response(raw)

    async def find(self, entity_id: int) -> EntityResponse[E]:
        logger.debug("REST request to get %s : %s", self.model.__name__, entity_id)
        raw = await self._transport.request("GET", f"{self.resource_url}/{entity_id}")
        return self.convert_response(raw)

    async def query(self, req: Mapping[str, Any] | None = None) -> EntityResponse[list[E]]:
        logger.debug("REST request to get a page of %s (%s)", self.model.__name__, req)
        options = create_request_option(req)
        raw = await self._transport.request("GET", self.resource_url, params=options)
        return self.convert_array_response(raw)

    async def delete(self, entity_id: int) -> EntityResponse[None]:
        logger.debug("REST request to delete %s : %s", self.model.__name__, entity_id)
        raw = await self._transport.request("DELETE", f"{self.resource_url}/{entity_id}")
        return EntityResponse(status_code=raw.status_code, headers=dict(raw.headers), body=None)

    async def search(self, req: Mapping[str, Any]) -> EntityResponse[list[E]]:
        """Búsqueda full-text (`query`) con paginación opcional."""

        if self.search_url is None:
            raise ServiceError(f"{self.model.__name__} has no search endpoint")
        logger.debug("REST request to search %s for %s", self.model.__name__, req.get("query"))
        options = create_request_option(req)
        raw = await self._transport.request("GET", self.search_url, params=options)
        return self.convert_array_response(raw)

    def convert_response(self, raw: RawResponse) -> EntityResponse[E]:
        body = self.convert_item_from_server(raw.body)
        return EntityResponse(status_code=raw.status_code, headers=dict(raw.headers), body=body)

    def convert_array_response(self, raw: RawResponse) -> EntityResponse[list[E]]:
        items = raw.body if raw.body is not None else []
        if not isinstance(items, list):
            raise ServiceError(f"expected a JSON array for {self.model.__name__} listing")
        body = [self.convert_item_from_server(item) for item in items]
        return EntityResponse(status_code=raw.status_code, headers=dict(raw.headers), body=body)

    def convert_item_from_server(self, data: Any) -> E:
        """Convierte el JSON devuelto por el servidor al modelo del cliente."""

        if not isinstance(data, Mapping):
            raise ServiceError(f"expected a JSON object for {self.model.__name__}")
        return self.model.model_validate(copy.deepcopy(dict(data)))

    def convert(self, entity: E) -> dict[str, Any]:
        """Convierte una entidad a un JSON que se puede enviar al servidor."""

        return entity.model_dump(mode="json", by_alias=True)


def _default_entity_name(model: type[BaseEntity]) -> str:
    name = model.__name__
    return name[:1].lower() + name[1:]
