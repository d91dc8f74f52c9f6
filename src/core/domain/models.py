"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta (tipos, enums cerrados) en el borde con el
  servidor sin acoplar el Core a librerías de I/O.
- El alias camelCase refleja el formato del API; en Python usamos snake_case.

Nota:
- `id is None` significa "todavía no persistido"; un `id` definido implica que
  la entidad existe en el servidor.
- Las relaciones se embeben como una forma mínima de la entidad relacionada.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class BaseEntity(BaseModel):
    """Contrato mínimo de toda entidad: un identificador opcional."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: int | None = Field(
        default=None,
        description="Identificador persistido; `None` si la entidad es un borrador.",
    )

    @property
    def is_new(self) -> bool:
        return self.id is None


class EntityRef(BaseEntity):
    """Forma mínima de una entidad relacionada (al menos `id`).

    Conserva cualquier campo extra que el servidor embeba (p.ej. `label`).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class NotificationType(str, Enum):
    """Clasificación cerrada de una notificación."""

    INFO = "INFO"
    ERROR = "ERROR"
    CHECK = "CHECK"


class InfoDefinition(BaseEntity):
    label: str | None = Field(default=None, description="Etiqueta visible de la definición.")


class Info(BaseEntity):
    value: str | None = Field(default=None, description="Valor informado.")
    date: datetime | None = Field(default=None, description="Momento de la medida.")
    definition: InfoDefinition | None = Field(
        default=None,
        description="Definición a la que pertenece el valor.",
    )
    notification: EntityRef | None = Field(
        default=None,
        description="Notificación que agrupa esta info (si existe).",
    )


class Notification(BaseEntity):
    date: datetime | None = Field(default=None, description="Momento de emisión.")
    type: NotificationType | None = Field(default=None, description="INFO, ERROR o CHECK.")
    title: str | None = Field(default=None, description="Título corto.")
    infos: list[EntityRef] = Field(
        default_factory=list,
        description="Infos asociadas (forma mínima).",
    )


class BuildingDataDefinition(BaseEntity):
    label: str | None = Field(default=None, description="Nombre del dato (p.ej. 'Temperatura').")
    unit: str | None = Field(default=None, description="Unidad de medida.")
    building: EntityRef | None = Field(
        default=None,
        description="Edificio al que pertenece la definición.",
    )


class Building(BaseEntity):
    title: str | None = Field(default=None, description="Nombre del edificio.")
    description: str | None = Field(default=None, description="Descripción libre.")
    plan: str | None = Field(
        default=None,
        description="Plano adjunto (base64). El manejo de bytes vive fuera del Core.",
    )
    plan_content_type: str | None = Field(
        default=None,
        description="MIME type del plano adjunto.",
    )
    datas: list[EntityRef] = Field(
        default_factory=list,
        description="Definiciones de datos del edificio (forma mínima).",
    )
