# File: pme/core/editor.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Orquestador de interacción: eventos de puntero -> mutaciones del store -> frame de render.
# Notes: Escucha al VertexStore; durante un drag los refrescos pasan por el throttle y el
#        drag-end siempre fuerza un refresco final.
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from pme.core.editing_phase import EditingPhase
from pme.core.markers import MarkerBuilder, default_midpoint_builder, default_point_builder
from pme.core.models import EditorStyle, LatLng
from pme.core.render import (
    MarkerDescriptor,
    MarkerRole,
    PointerEvent,
    PointerKind,
    RenderFrame,
    RenderSurface,
    ShapeKind,
    ShapePrimitive,
)
from pme.core.throttle import DragThrottle
from pme.core.version import DEFAULT_THROTTLE_MS, MIN_POLYGON_POINTS
from pme.core.vertex_store import VertexStore
from pme.geom import compute_midpoints, interleave, point_in_shape
from pme.utils.log import get_logger

log = get_logger(__name__)


class DragKind(str, Enum):
    VERTEX = "vertex"
    MIDPOINT = "midpoint"
    SHAPE = "shape"


@dataclass
class DragState:
    """Gesto de arrastre en curso (uno a la vez)."""

    kind: DragKind
    index: int = -1
    # MIDPOINT: posición efímera del midpoint. SHAPE: último punto usado como ancla.
    position: Optional[LatLng] = None


class PolygonEditor:
    """Orquesta la edición de un polígono sobre un VertexStore.

    Flujo:
        host -> handle_event(PointerEvent) -> mutación del store -> notificación
        -> recomputo de midpoints / secuencia intercalada -> surface.render_frame(frame)

    Reglas de fase (creating / editing):
        - creating: tap en el mapa agrega vértice; tap en el vértice inicial con
          >= 3 vértices cierra el polígono (pasa a editing).
        - editing: drag de vértices, drag de midpoints (inserta al soltar),
          long-press en vértice borra (solo si quedan > 3), long-press adentro
          del polígono arranca el arrastre de la forma completa.
    """

    def __init__(
        self,
        store: VertexStore,
        surface: Optional[RenderSurface] = None,
        *,
        style: Optional[EditorStyle] = None,
        throttle_ms: float = DEFAULT_THROTTLE_MS,
        point_builder: Optional[MarkerBuilder] = None,
        midpoint_builder: Optional[MarkerBuilder] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._store = store
        self._surface = surface
        self._style = style or EditorStyle()
        self._point_builder: MarkerBuilder = point_builder or default_point_builder
        self._midpoint_builder: MarkerBuilder = midpoint_builder or default_midpoint_builder
        self._throttle = DragThrottle(throttle_ms, clock=clock)

        self._midpoints: list[LatLng] = []
        self._render_sequence: list[LatLng] = []
        self._show_midpoints = True
        self._drag: Optional[DragState] = None
        self._cursor: Optional[LatLng] = None

        self._refresh_count = 0
        self._last_frame: Optional[RenderFrame] = None

        self._handle: Optional[int] = store.subscribe(self._on_store_changed)
        self._force_refresh()

    # ----------------------------
    # Estado derivado (solo lectura)
    # ----------------------------
    @property
    def store(self) -> VertexStore:
        return self._store

    @property
    def phase(self) -> EditingPhase:
        return self._store.phase

    @property
    def style(self) -> EditorStyle:
        return self._style

    @property
    def midpoints(self) -> tuple[LatLng, ...]:
        return tuple(self._midpoints)

    @property
    def render_sequence(self) -> tuple[LatLng, ...]:
        return tuple(self._render_sequence)

    @property
    def midpoints_visible(self) -> bool:
        return self._store.phase.closed and self._show_midpoints

    @property
    def cursor_position(self) -> Optional[LatLng]:
        return self._cursor

    @property
    def drag(self) -> Optional[DragState]:
        return self._drag

    @property
    def throttle_ms(self) -> float:
        return self._throttle.interval_ms

    @property
    def refresh_count(self) -> int:
        """Cantidad de recomputos aplicados (útil para medir el throttle)."""
        return self._refresh_count

    @property
    def last_frame(self) -> Optional[RenderFrame]:
        return self._last_frame

    @property
    def refresh_pending(self) -> bool:
        """Hay un update descartado por el throttle que la superficie todavía no vio."""
        return self._throttle.pending

    # ----------------------------
    # Configuración
    # ----------------------------
    def set_surface(self, surface: Optional[RenderSurface]) -> None:
        self._surface = surface
        self._force_refresh()

    def set_style(self, style: EditorStyle) -> None:
        self._style = style
        self._force_refresh()

    def set_throttle_ms(self, throttle_ms: float) -> None:
        self._throttle.set_interval_ms(throttle_ms)

    def dispose(self) -> None:
        if self._handle is not None:
            self._store.unsubscribe(self._handle)
            self._handle = None

    # ----------------------------
    # Comandos del host (toolbar / atajos)
    # ----------------------------
    def toggle_phase(self) -> EditingPhase:
        self._cancel_drag()
        self._store.set_phase(self._store.phase.toggled())
        return self._store.phase

    def reset(self) -> None:
        """Borra la forma y vuelve a la fase de creación."""
        self._cancel_drag()
        self._cursor = None
        self._store.clear()
        self._store.set_phase(EditingPhase.CREATING)

    def undo_last(self) -> Optional[LatLng]:
        return self._store.remove_last()

    # ----------------------------
    # Eventos de puntero
    # ----------------------------
    def handle_event(self, event: PointerEvent) -> None:
        kind = PointerKind(event.kind)
        target = event.target
        if kind == PointerKind.TAP:
            if target is None:
                self._on_map_tap(event.geo)
            elif target.role == MarkerRole.VERTEX:
                self._on_vertex_tap(target.index)
        elif kind == PointerKind.LONG_PRESS:
            if target is None:
                self._on_map_long_press(event.geo)
            elif target.role == MarkerRole.VERTEX:
                self._on_vertex_long_press(target.index)
        elif kind == PointerKind.DRAG_START:
            if target is not None:
                self._on_drag_start(target.role, target.index)
        elif kind == PointerKind.DRAG_UPDATE:
            self._on_drag_update(event.geo)
        elif kind == PointerKind.DRAG_END:
            self._on_drag_end(event.geo)
        elif kind == PointerKind.HOVER:
            self._on_hover(event.geo)
        elif kind == PointerKind.EXIT:
            self._on_exit()

    def _on_map_tap(self, geo: Optional[LatLng]) -> None:
        if self._drag is not None and self._drag.kind == DragKind.SHAPE:
            log.debug("Fin de arrastre de la forma")
            self._drag = None
            self._force_refresh()
            return
        if geo is not None and self._store.phase == EditingPhase.CREATING:
            self._store.add_point(geo)

    def _on_vertex_tap(self, index: int) -> None:
        if (
            index == 0
            and self._store.phase == EditingPhase.CREATING
            and len(self._store) >= MIN_POLYGON_POINTS
        ):
            log.debug("Polígono cerrado (%d vértices)", len(self._store))
            self._store.set_phase(EditingPhase.EDITING)

    def _on_vertex_long_press(self, index: int) -> None:
        if self._store.phase != EditingPhase.EDITING:
            return
        if len(self._store) <= MIN_POLYGON_POINTS:
            log.debug("Borrado rechazado: el polígono quedaría con menos de %d vértices", MIN_POLYGON_POINTS)
            return
        self._store.remove_point(index)

    def _on_map_long_press(self, geo: Optional[LatLng]) -> None:
        if geo is None or self._drag is not None:
            return
        if self._store.phase != EditingPhase.EDITING or len(self._store) < MIN_POLYGON_POINTS:
            return
        if point_in_shape(geo, self._store.points):
            log.debug("Inicio de arrastre de la forma en %s", geo)
            self._drag = DragState(DragKind.SHAPE, position=geo)
            self._throttle.reset()

    def _on_drag_start(self, role: MarkerRole, index: int) -> None:
        if role == MarkerRole.VERTEX:
            if not 0 <= index < len(self._store):
                return
            self._drag = DragState(DragKind.VERTEX, index)
            if self._store.phase.closed:
                self._show_midpoints = False
        else:
            if not self.midpoints_visible or not 0 <= index < len(self._midpoints):
                return
            self._drag = DragState(DragKind.MIDPOINT, index, position=self._midpoints[index])
        self._force_refresh()
        # El primer update del gesto se muestra sin esperar la ventana.
        self._throttle.reset()

    def _on_drag_update(self, geo: Optional[LatLng]) -> None:
        drag = self._drag
        if drag is None or geo is None:
            return
        if drag.kind == DragKind.VERTEX:
            # Notifica -> _on_store_changed -> refresco con throttle.
            self._store.update_point(drag.index, geo)
        elif drag.kind == DragKind.MIDPOINT:
            drag.position = geo
            self._request_refresh()

    def _on_drag_end(self, geo: Optional[LatLng]) -> None:
        drag = self._drag
        if drag is None or drag.kind == DragKind.SHAPE:
            return
        self._drag = None

        if drag.kind == DragKind.VERTEX:
            self._show_midpoints = True
            i = drag.index
            if geo is not None and 0 <= i < len(self._store) and self._store[i] != geo:
                self._store.update_point(i, geo)
            else:
                self._force_refresh()
            return

        n = len(self._store)
        final = geo or drag.position
        if n == 0 or final is None:
            self._force_refresh()
            return
        insert_index = (drag.index + 1) % n if self._store.phase.closed else drag.index + 1
        self._store.insert_point(insert_index, final)
        if not 0 <= insert_index <= n:
            # Índice inválido (store cambió en medio del gesto): no hubo notificación.
            self._force_refresh()

    def _on_hover(self, geo: Optional[LatLng]) -> None:
        if geo is None:
            return
        drag = self._drag
        if drag is not None and drag.kind == DragKind.SHAPE:
            anchor = drag.position or geo
            drag.position = geo
            self._store.translate(geo.lat - anchor.lat, geo.lng - anchor.lng)
            return
        if self._store.phase == EditingPhase.CREATING:
            self._cursor = geo
            self._request_refresh()

    def _on_exit(self) -> None:
        if self._cursor is not None:
            self._cursor = None
            self._force_refresh()
        else:
            self.flush_pending()

    def _cancel_drag(self) -> None:
        if self._drag is not None:
            self._drag = None
            self._show_midpoints = True

    # ----------------------------
    # Refresco
    # ----------------------------
    def _on_store_changed(self) -> None:
        if self._store.phase.closed:
            self._cursor = None
        if self._drag is not None:
            self._request_refresh()
        else:
            self._force_refresh()

    def _request_refresh(self) -> None:
        if self._throttle.should_apply():
            self._refresh()

    def _force_refresh(self) -> None:
        self._throttle.force()
        self._refresh()

    def refresh(self) -> RenderFrame:
        """Recomputo incondicional; devuelve el frame empujado a la superficie."""
        self._throttle.force()
        return self._refresh()

    def flush_pending(self) -> bool:
        """Aplica el último update que el throttle dejó sin dibujar.

        El host lo llama cuando el puntero se detiene (timer de una ventana de
        throttle). Devuelve True si hubo refresco.
        """
        if not self._throttle.pending:
            return False
        self._force_refresh()
        return True

    def _refresh(self) -> RenderFrame:
        points = self._store.points
        phase = self._store.phase

        midpoints = compute_midpoints(points, phase)
        drag = self._drag
        if (
            drag is not None
            and drag.kind == DragKind.MIDPOINT
            and drag.position is not None
            and 0 <= drag.index < len(midpoints)
        ):
            midpoints[drag.index] = drag.position
        self._midpoints = midpoints
        self._render_sequence = interleave(points, midpoints)

        frame = self._build_frame(points, phase)
        self._refresh_count += 1
        self._last_frame = frame
        if self._surface is not None:
            self._surface.render_frame(frame)
        return frame

    def _build_frame(self, points: tuple[LatLng, ...], phase: EditingPhase) -> RenderFrame:
        st = self._style
        seq = tuple(self._render_sequence)
        shapes: list[ShapePrimitive] = []
        if phase.closed and len(points) >= MIN_POLYGON_POINTS:
            shapes.append(ShapePrimitive(ShapeKind.POLYGON, seq, st.border_width, st.border_color, st.fill_color))
        elif len(points) >= 2:
            shapes.append(ShapePrimitive(ShapeKind.POLYLINE, seq, st.border_width, st.border_color))
        if not phase.closed and self._cursor is not None and points:
            shapes.append(
                ShapePrimitive(ShapeKind.GUIDE, (points[-1], self._cursor), st.border_width, st.border_color)
            )

        drag = self._drag
        markers: list[MarkerDescriptor] = []
        for i, p in enumerate(points):
            dragging = drag is not None and drag.kind == DragKind.VERTEX and drag.index == i
            is_start = i == 0 and phase == EditingPhase.CREATING
            markers.append(
                MarkerDescriptor(
                    role=MarkerRole.VERTEX,
                    index=i,
                    position=p,
                    size=st.point_size,
                    dragging=dragging,
                    is_start=is_start,
                    visual=self._point_builder(p, dragging, is_start),
                )
            )
        if self.midpoints_visible:
            for i, m in enumerate(self._midpoints):
                dragging = drag is not None and drag.kind == DragKind.MIDPOINT and drag.index == i
                markers.append(
                    MarkerDescriptor(
                        role=MarkerRole.MIDPOINT,
                        index=i,
                        position=m,
                        size=st.midpoint_size,
                        dragging=dragging,
                        is_start=False,
                        visual=self._midpoint_builder(m, dragging, False),
                    )
                )

        return RenderFrame(phase=phase, shapes=tuple(shapes), markers=tuple(markers), render_sequence=seq)
