# File: pme/core/vertex_store.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Store autoritativo de vértices + fase, con notificación a suscriptores.
# Notes: Índices fuera de rango son no-op silenciosos (contrato, no bug).
from __future__ import annotations

from typing import Callable, Iterable, Optional, Sequence

from pme.core.editing_phase import EditingPhase, coerce_editing_phase
from pme.core.models import LatLng
from pme.utils.log import get_logger

log = get_logger(__name__)

Listener = Callable[[], None]


class VertexStore:
    """Secuencia ordenada de vértices de la forma en edición.

    Todas las mutaciones son síncronas. Cada mutación exitosa notifica a los
    suscriptores *antes* de retornar, así un listener siempre ve el estado final.
    Las mutaciones que no cambian nada (índice inválido, misma fase, etc.)
    no notifican.
    """

    def __init__(
        self,
        points: Optional[Iterable[LatLng | Sequence[float]]] = None,
        *,
        phase: EditingPhase | str = EditingPhase.CREATING,
    ) -> None:
        self._points: list[LatLng] = [LatLng.coerce(p) for p in (points or ())]
        self._phase: EditingPhase = coerce_editing_phase(phase)
        self._listeners: dict[int, Listener] = {}
        self._next_handle = 1

    # ----------------------------
    # Lectura
    # ----------------------------
    @property
    def points(self) -> tuple[LatLng, ...]:
        """Vista de solo lectura (tupla) de los vértices."""
        return tuple(self._points)

    @property
    def phase(self) -> EditingPhase:
        return self._phase

    @property
    def is_empty(self) -> bool:
        return not self._points

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> LatLng:
        return self._points[index]

    # ----------------------------
    # Suscripción
    # ----------------------------
    def subscribe(self, listener: Listener) -> int:
        """Registra un callback sin argumentos. Devuelve un handle para desuscribir."""
        handle = self._next_handle
        self._next_handle += 1
        self._listeners[handle] = listener
        return handle

    def unsubscribe(self, handle: int) -> bool:
        return self._listeners.pop(handle, None) is not None

    def _notify(self) -> None:
        # Snapshot: altas/bajas durante la notificación aplican a la próxima.
        for listener in list(self._listeners.values()):
            listener()

    # ----------------------------
    # Mutaciones
    # ----------------------------
    def set_phase(self, phase: EditingPhase | str) -> None:
        new_phase = coerce_editing_phase(phase, default=self._phase)
        if new_phase == self._phase:
            return
        log.debug("Fase: %s -> %s", self._phase.value, new_phase.value)
        self._phase = new_phase
        self._notify()

    def add_point(self, point: LatLng | Sequence[float]) -> None:
        self._points.append(LatLng.coerce(point))
        self._notify()

    def insert_point(self, index: int, point: LatLng | Sequence[float]) -> None:
        if 0 <= index <= len(self._points):
            self._points.insert(index, LatLng.coerce(point))
            self._notify()

    def update_point(self, index: int, point: LatLng | Sequence[float]) -> None:
        if 0 <= index < len(self._points):
            self._points[index] = LatLng.coerce(point)
            self._notify()

    def remove_point(self, index: int) -> None:
        if 0 <= index < len(self._points):
            del self._points[index]
            self._notify()

    def remove_last(self) -> Optional[LatLng]:
        """Quita y devuelve el último vértice; None si no había ninguno."""
        if not self._points:
            return None
        point = self._points.pop()
        self._notify()
        return point

    def clear(self) -> None:
        self._points.clear()
        self._notify()

    def set_points(self, points: Iterable[LatLng | Sequence[float]]) -> None:
        # Copia: mutar la lista del caller después no debe afectar al store.
        self._points = [LatLng.coerce(p) for p in points]
        self._notify()

    def translate(self, lat_offset: float, lng_offset: float) -> None:
        """Traslación rígida de toda la forma (arrastre del polígono completo)."""
        self._points = [p.offset(lat_offset, lng_offset) for p in self._points]
        self._notify()
