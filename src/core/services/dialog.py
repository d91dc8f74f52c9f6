"""Coordinador de diálogos de edición/creación (máquina de estados).

Estados: `CLOSED -> OPENING -> EDITING -> {SAVING -> CLOSED} | {CANCELLED -> CLOSED}`.

Por qué una máquina de estados plana:
- El modal concreto (Qt, web, consola) es un adaptador que escucha las
  transiciones; el Core no conoce ningún toolkit.
- Si `find` falla al abrir, el diálogo vuelve a `CLOSED` con `open_error`
  y nunca entra en `EDITING`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Generic, Mapping, TypeVar

from core.domain.models import BaseEntity
from core.errors import DialogStateError
from core.services.entity_service import EntityService
from core.services.event_bus import ACK, EventManager, modification_event
from core.services.lifecycle import Component
from core.services.routing import ActivatedRoute, route_id

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseEntity)

CANCEL = "cancel"


class DialogState(str, Enum):
    CLOSED = "closed"
    OPENING = "opening"
    EDITING = "editing"
    SAVING = "saving"
    CANCELLED = "cancelled"


TransitionListener = Callable[[DialogState, DialogState], None]

_ALLOWED: dict[DialogState, tuple[DialogState, ...]] = {
    DialogState.CLOSED: (DialogState.OPENING,),
    DialogState.OPENING: (DialogState.EDITING, DialogState.CLOSED),
    DialogState.EDITING: (DialogState.SAVING, DialogState.CANCELLED),
    DialogState.SAVING: (DialogState.CLOSED, DialogState.EDITING),
    DialogState.CANCELLED: (DialogState.CLOSED,),
}


class EntityDialog(Generic[E]):
    """Una interacción de creación/edición sobre una entidad."""

    def __init__(
        self,
        service: EntityService[E],
        events: EventManager,
        *,
        event_name: str | None = None,
    ) -> None:
        self._service = service
        self._events = events
        self.event_name = event_name or modification_event(service.entity_name)
        self.state = DialogState.CLOSED
        self.entity: E | None = None
        self.is_saving = False
        self.result: E | str | None = None
        self.open_error: BaseException | None = None
        self._listeners: list[TransitionListener] = []

    def on_transition(self, listener: TransitionListener) -> Callable[[], None]:
        """Registra un listener `(anterior, nuevo)`; devuelve la función para quitarlo."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _transition(self, new: DialogState) -> None:
        old = self.state
        if new not in _ALLOWED[old]:
            raise DialogStateError(f"illegal dialog transition {old.value} -> {new.value}")
        self.state = new
        logger.debug("%s dialog: %s -> %s", self._service.entity_name, old.value, new.value)
        for listener in list(self._listeners):
            listener(old, new)

    def _require(self, state: DialogState, action: str) -> None:
        if self.state is not state:
            raise DialogStateError(f"cannot {action} while {self.state.value}")

    @property
    def is_open(self) -> bool:
        return self.state in (DialogState.EDITING, DialogState.SAVING)

    async def open(self, entity_id: int | None = None) -> E:
        """Abre en modo edición (`entity_id`) o creación (sin id)."""

        self._require(DialogState.CLOSED, "open")
        self.open_error = None
        self.result = None
        self._transition(DialogState.OPENING)
        if entity_id is None:
            entity = self._service.model()
        else:
            try:
                response = await self._service.find(entity_id)
            except Exception as exc:
                self.open_error = exc
                self._transition(DialogState.CLOSED)
                raise
            entity = response.body
        self.entity = entity
        self._transition(DialogState.EDITING)
        return entity

    def edit(self, **changes: Any) -> E:
        """Aplica cambios al borrador validándolos con el modelo.

        Acepta nombres de campo o sus alias de servidor; una clave que el
        modelo no conoce es un `KeyError` (no se descarta en silencio).
        """

        self._require(DialogState.EDITING, "edit")
        assert self.entity is not None
        model = self._service.model
        names = {name: name for name in model.model_fields}
        names.update({f.alias: name for name, f in model.model_fields.items() if f.alias})
        unknown = sorted(set(changes) - set(names))
        if unknown:
            raise KeyError(f"unknown {self._service.entity_name} field(s): {', '.join(unknown)}")
        data = self.entity.model_dump()
        data.update({names[key]: value for key, value in changes.items()})
        self.entity = self._service.model.model_validate(data)
        return self.entity

    async def save(self) -> E:
        """Crea (sin id) o actualiza (con id); publica el cambio al terminar."""

        if self.is_saving:
            raise DialogStateError("save already in progress")
        self._require(DialogState.EDITING, "save")
        assert self.entity is not None
        self.is_saving = True
        self._transition(DialogState.SAVING)
        try:
            if self.entity.id is not None:
                response = await self._service.update(self.entity)
            else:
                response = await self._service.create(self.entity)
        except Exception:
            self.is_saving = False
            self._transition(DialogState.EDITING)
            raise
        # Persistido: se cierra antes de notificar; un handler que falle no
        # deja el diálogo en SAVING.
        self.is_saving = False
        self.result = response.body
        self._transition(DialogState.CLOSED)
        self._events.broadcast(self.event_name, ACK)
        return response.body

    def clear(self) -> str:
        """Cancela la edición sin publicar nada."""

        self._require(DialogState.EDITING, "cancel")
        self._transition(DialogState.CANCELLED)
        self.result = CANCEL
        self._transition(DialogState.CLOSED)
        return CANCEL


DialogFactory = Callable[[], EntityDialog[E]]


class PopupCoordinator(Component, Generic[E]):
    """Abre un `EntityDialog` cada vez que cambian los parámetros de ruta.

    Con `id` en la ruta edita la entidad existente; sin `id` crea una nueva.
    """

    def __init__(self, route: ActivatedRoute, dialog_factory: DialogFactory) -> None:
        super().__init__()
        self._route = route
        self._dialog_factory = dialog_factory
        self.dialog: EntityDialog[E] | None = None
        self._opening = None

    def activate(self) -> None:
        self.alive = True
        self.own(self._route.subscribe(self._on_params))

    def _on_params(self, params: Mapping[str, Any]) -> None:
        dialog = self._dialog_factory()
        self.dialog = dialog
        self._opening = self.spawn(dialog.open(route_id(params)))

    async def opened(self) -> EntityDialog[E]:
        """Espera la apertura en curso; re-lanza el error si `find` falló."""

        if self._opening is None or self.dialog is None:
            raise DialogStateError("popup is not active")
        await self._opening
        return self.dialog

    def destroy(self) -> None:
        self.alive = False
        self.release_all()
