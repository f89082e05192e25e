# File: pme/core/render.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Contrato con el host: eventos de puntero (entrada) y primitivas de render (salida).
# Notes: Solo datos + Protocol. El host (Qt u otro) proyecta, hace hit-test y dibuja.
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple

from pme.core.editing_phase import EditingPhase
from pme.core.models import RGBA, LatLng, Size


class PointerKind(str, Enum):
    TAP = "tap"
    LONG_PRESS = "long_press"
    DRAG_START = "drag_start"
    DRAG_UPDATE = "drag_update"
    DRAG_END = "drag_end"
    HOVER = "hover"
    EXIT = "exit"


class MarkerRole(str, Enum):
    VERTEX = "vertex"
    MIDPOINT = "midpoint"


class ShapeKind(str, Enum):
    POLYGON = "polygon"    # relleno + borde (forma cerrada)
    POLYLINE = "polyline"  # solo trazo (forma abierta)
    GUIDE = "guide"        # último vértice -> cursor (fase creating)


@dataclass(frozen=True)
class MarkerTarget:
    """Marcador bajo el puntero (resuelto por el hit-test del host)."""

    role: MarkerRole
    index: int


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    geo: Optional[LatLng] = None
    screen: Optional[Tuple[float, float]] = None
    target: Optional[MarkerTarget] = None  # None = fondo del mapa


@dataclass(frozen=True)
class MarkerVisual:
    """Descriptor visual de un marcador (lo produce un MarkerBuilder)."""

    fill: RGBA
    border: RGBA = (255, 255, 255, 255)
    border_width: float = 2.0
    icon: Optional[str] = None
    shadow: bool = True


@dataclass(frozen=True)
class MarkerDescriptor:
    role: MarkerRole
    index: int
    position: LatLng
    size: Size
    dragging: bool
    is_start: bool
    visual: MarkerVisual


@dataclass(frozen=True)
class ShapePrimitive:
    kind: ShapeKind
    points: Tuple[LatLng, ...]
    border_width: float
    border_color: RGBA
    fill_color: Optional[RGBA] = None


@dataclass(frozen=True)
class RenderFrame:
    phase: EditingPhase
    shapes: Tuple[ShapePrimitive, ...] = ()
    markers: Tuple[MarkerDescriptor, ...] = ()
    render_sequence: Tuple[LatLng, ...] = field(default=())

    def markers_of(self, role: MarkerRole) -> list[MarkerDescriptor]:
        return [m for m in self.markers if m.role == role]

    def shape_of(self, kind: ShapeKind) -> Optional[ShapePrimitive]:
        for s in self.shapes:
            if s.kind == kind:
                return s
        return None


class RenderSurface(Protocol):
    """Superficie de render del host. Recibe el frame completo en cada refresco."""

    def render_frame(self, frame: RenderFrame) -> None:  # pragma: no cover (protocol)
        ...
