# File: pme/ui/map_view.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Superficie de render Qt (QGraphicsView) + fuente de PointerEvents para el editor.
# Notes: Proyección plana simple (x = lng, y = -lat) escalada; el núcleo no proyecta.
#        Hit-test de marcadores en píxeles de viewport (vértices tienen prioridad).
from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPoint, QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPainterPath, QPen, QPolygonF
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsEllipseItem,
    QGraphicsItem,
    QGraphicsPathItem,
    QGraphicsPolygonItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
    QGraphicsView,
)

from pme.core.models import LatLng
from pme.core.render import (
    MarkerDescriptor,
    MarkerRole,
    MarkerTarget,
    PointerEvent,
    PointerKind,
    RenderFrame,
    ShapeKind,
    ShapePrimitive,
)
from pme.core.version import DEFAULT_HIT_RADIUS_PX, DEFAULT_LONG_PRESS_MS


Z_SHAPES = 0.0
Z_MIDPOINTS = 10.0
Z_VERTICES = 20.0

BACKGROUND_RGB = (236, 239, 241)


def _event_pos(event) -> QPoint:
    try:
        return event.position().toPoint()  # Qt6
    except AttributeError:
        return event.pos()


@dataclass
class _PressState:
    vp: QPoint
    target: Optional[MarkerTarget]
    t0: float
    # Se movió más allá de startDragDistance sobre el fondo: ya no es tap.
    cancelled: bool = False


class MapView(QGraphicsView):
    """Vista del mapa: dibuja RenderFrames y traduce el mouse a PointerEvents.

    Gestos:
        - press + mover sobre un marcador: drag_start / drag_update / drag_end
        - press + soltar sin mover: tap (o long_press si se sostuvo >= long_press_ms)
        - botón derecho: long_press inmediato
        - mover sin botones: hover; salir del widget: exit
        - rueda: zoom de la vista
    """

    pointer_event = Signal(object)  # PointerEvent
    cursor_moved = Signal(object)  # LatLng | None

    def __init__(
        self,
        parent=None,
        *,
        px_per_degree: float = 2000.0,
        hit_radius_px: int = DEFAULT_HIT_RADIUS_PX,
        long_press_ms: int = DEFAULT_LONG_PRESS_MS,
    ) -> None:
        super().__init__(parent)
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setMouseTracking(True)
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setBackgroundBrush(QBrush(QColor(*BACKGROUND_RGB)))
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)

        self._px_per_degree = float(px_per_degree)
        self._hit_radius_px = int(hit_radius_px)
        self._long_press_ms = int(long_press_ms)

        self._frame: Optional[RenderFrame] = None
        self._press: Optional[_PressState] = None
        self._dragging = False

    # ------------------------------ Config

    def set_hit_radius_px(self, px: int) -> None:
        self._hit_radius_px = max(1, int(px))

    def set_long_press_ms(self, ms: int) -> None:
        self._long_press_ms = max(1, int(ms))

    @property
    def frame(self) -> Optional[RenderFrame]:
        return self._frame

    # ------------------------------ Proyección

    def scene_from_geo(self, p: LatLng) -> QPointF:
        k = self._px_per_degree
        return QPointF(p.lng * k, -p.lat * k)

    def geo_from_scene(self, pt: QPointF) -> LatLng:
        k = self._px_per_degree
        return LatLng(-pt.y() / k, pt.x() / k)

    def geo_from_viewport(self, vp: QPoint) -> LatLng:
        return self.geo_from_scene(self.mapToScene(vp))

    def center_on_geo(self, p: LatLng) -> None:
        self.centerOn(self.scene_from_geo(p))

    def fit_to_frame(self, pad_px: float = 40.0) -> bool:
        if self._frame is None or not self._frame.markers:
            return False
        pts = [self.scene_from_geo(m.position) for m in self._frame.markers]
        xs = [p.x() for p in pts]
        ys = [p.y() for p in pts]
        r = QRectF(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))
        self.fitInView(r.adjusted(-pad_px, -pad_px, pad_px, pad_px), Qt.KeepAspectRatio)
        return True

    # ------------------------------ RenderSurface

    def render_frame(self, frame: RenderFrame) -> None:
        self._frame = frame
        self._scene.clear()
        for shape in frame.shapes:
            self._add_shape(shape)
        for marker in frame.markers:
            self._add_marker(marker)

    def _add_shape(self, shape: ShapePrimitive) -> QGraphicsItem:
        pen = QPen(QColor(*shape.border_color))
        pen.setWidthF(float(shape.border_width))
        pen.setCosmetic(True)
        pts = [self.scene_from_geo(p) for p in shape.points]
        if shape.kind == ShapeKind.POLYGON:
            item = QGraphicsPolygonItem(QPolygonF(pts))
            item.setBrush(QBrush(QColor(*(shape.fill_color or (0, 0, 0, 0)))))
        else:
            if shape.kind == ShapeKind.GUIDE:
                pen.setStyle(Qt.DashLine)
            path = QPainterPath()
            if pts:
                path.moveTo(pts[0])
                for p in pts[1:]:
                    path.lineTo(p)
            item = QGraphicsPathItem(path)
        item.setPen(pen)
        item.setZValue(Z_SHAPES)
        self._scene.addItem(item)
        return item

    def _add_marker(self, m: MarkerDescriptor) -> QGraphicsItem:
        w, h = m.size
        item = QGraphicsEllipseItem(QRectF(-w / 2.0, -h / 2.0, w, h))
        item.setBrush(QBrush(QColor(*m.visual.fill)))
        pen = QPen(QColor(*m.visual.border))
        pen.setWidthF(float(m.visual.border_width))
        item.setPen(pen)
        # Tamaño en px de pantalla, independiente del zoom.
        item.setFlag(QGraphicsItem.ItemIgnoresTransformations, True)
        item.setPos(self.scene_from_geo(m.position))
        item.setZValue(Z_VERTICES if m.role == MarkerRole.VERTEX else Z_MIDPOINTS)
        item.setData(0, m.role.value)
        item.setData(1, m.index)
        if m.visual.icon == "plus":
            txt = QGraphicsSimpleTextItem("+", item)
            txt.setBrush(QBrush(QColor(255, 255, 255)))
            br = txt.boundingRect()
            txt.setPos(-br.width() / 2.0, -br.height() / 2.0)
        self._scene.addItem(item)
        return item

    # ------------------------------ Hit-test

    def hit_test(self, vp: QPoint) -> Optional[MarkerTarget]:
        """Marcador más cercano bajo `vp` (px de viewport); vértices antes que midpoints."""
        if self._frame is None:
            return None
        best: Optional[tuple[int, float, MarkerDescriptor]] = None
        for m in self._frame.markers:
            mp = self.mapFromScene(self.scene_from_geo(m.position))
            d = math.hypot(mp.x() - vp.x(), mp.y() - vp.y())
            radius = max(float(self._hit_radius_px), max(m.size) / 2.0)
            if d > radius:
                continue
            rank = 0 if m.role == MarkerRole.VERTEX else 1
            if best is None or (rank, d) < (best[0], best[1]):
                best = (rank, d, m)
        if best is None:
            return None
        return MarkerTarget(best[2].role, best[2].index)

    # ------------------------------ Eventos Qt

    def _emit(self, kind: PointerKind, vp: Optional[QPoint], target: Optional[MarkerTarget] = None) -> None:
        geo = self.geo_from_viewport(vp) if vp is not None else None
        screen = (float(vp.x()), float(vp.y())) if vp is not None else None
        self.pointer_event.emit(PointerEvent(kind=kind, geo=geo, screen=screen, target=target))

    def mousePressEvent(self, event) -> None:
        btn = event.button()
        vp = _event_pos(event)
        if btn == Qt.RightButton:
            self._emit(PointerKind.LONG_PRESS, vp, self.hit_test(vp))
            event.accept()
            return
        if btn == Qt.LeftButton:
            self._press = _PressState(vp=vp, target=self.hit_test(vp), t0=time.monotonic())
            self._dragging = False
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        vp = _event_pos(event)
        press = self._press
        if press is not None and (event.buttons() & Qt.LeftButton):
            if not self._dragging and not press.cancelled:
                moved = (vp - press.vp).manhattanLength()
                if moved >= QApplication.startDragDistance():
                    if press.target is None:
                        press.cancelled = True
                    else:
                        self._dragging = True
                        self._emit(PointerKind.DRAG_START, press.vp, press.target)
            if self._dragging:
                self._emit(PointerKind.DRAG_UPDATE, vp, press.target)
            event.accept()
            return
        self._emit(PointerKind.HOVER, vp)
        self.cursor_moved.emit(self.geo_from_viewport(vp))
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:
        press = self._press
        if press is None or event.button() != Qt.LeftButton:
            super().mouseReleaseEvent(event)
            return
        vp = _event_pos(event)
        self._press = None
        if self._dragging:
            self._dragging = False
            self._emit(PointerKind.DRAG_END, vp, press.target)
        elif not press.cancelled:
            held_ms = (time.monotonic() - press.t0) * 1000.0
            kind = PointerKind.LONG_PRESS if held_ms >= self._long_press_ms else PointerKind.TAP
            self._emit(kind, press.vp, press.target)
        event.accept()

    def leaveEvent(self, event) -> None:
        self._emit(PointerKind.EXIT, None)
        self.cursor_moved.emit(None)
        super().leaveEvent(event)

    def wheelEvent(self, event) -> None:
        dy = event.angleDelta().y()
        if dy == 0:
            return
        factor = 1.15 if dy > 0 else 1.0 / 1.15
        self.scale(factor, factor)
        event.accept()
