# File: pme/ui/main_window.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Ventana principal: MapView + PolygonEditor + toolbar de fase/deshacer/limpiar.
# Notes: La ventana solo conecta piezas; la lógica de edición vive en pme.core.editor.
from __future__ import annotations

import base64
import binascii

from PySide6.QtCore import QTimer
from PySide6.QtGui import QAction, QCloseEvent, QKeySequence
from PySide6.QtWidgets import QLabel, QMainWindow, QStatusBar, QToolBar

from pme.core.editing_phase import EditingPhase
from pme.core.editor import PolygonEditor
from pme.core.models import LatLng
from pme.core.render import PointerEvent
from pme.core.settings import AppSettings
from pme.core.version import APP_NAME, APP_VERSION
from pme.core.vertex_store import VertexStore
from pme.ui.map_view import MapView
from pme.utils.log import get_logger

log = get_logger(__name__)

HINT_CREATING = "Click en el mapa para agregar punto · Click en el punto inicial (verde) para cerrar"
HINT_EDITING = (
    "Arrastrar puntos para mover · Click derecho en un punto para borrar · "
    "Arrastrar midpoints para insertar · Click derecho adentro para mover el polígono"
)


class MainWindow(QMainWindow):
    def __init__(self, settings: AppSettings | None = None) -> None:
        super().__init__()
        self.setWindowTitle("{} v{}".format(APP_NAME, APP_VERSION))
        self.resize(1100, 750)

        self._settings = settings or AppSettings.load()

        self._store = VertexStore(phase=self._settings.initial_phase)
        self._view = MapView(
            self,
            hit_radius_px=self._settings.hit_radius_px,
            long_press_ms=self._settings.long_press_ms,
        )
        self.setCentralWidget(self._view)
        self._editor = PolygonEditor(
            self._store,
            self._view,
            style=self._settings.style,
            throttle_ms=self._settings.throttle_ms,
        )
        # Update final que el throttle descartó: se dibuja cuando el puntero se detiene.
        self._flush_timer = QTimer(self)
        self._flush_timer.setSingleShot(True)
        self._flush_timer.setInterval(max(1, int(round(self._settings.throttle_ms))))
        self._flush_timer.timeout.connect(self._editor.flush_pending)

        self._view.pointer_event.connect(self._on_pointer_event)
        self._view.cursor_moved.connect(self._on_cursor_moved)

        self._build_toolbar()

        sb = QStatusBar(self)
        self.setStatusBar(sb)
        self._status_label = QLabel("", self)
        self._cursor_label = QLabel("", self)
        sb.addPermanentWidget(self._cursor_label)
        sb.addPermanentWidget(self._status_label)

        self._store.subscribe(self._update_status)
        self._restore_ui_state()
        self._view.center_on_geo(LatLng(0.0, 0.0))
        self._update_status()

    @property
    def editor(self) -> PolygonEditor:
        return self._editor

    def _build_toolbar(self) -> None:
        tb = QToolBar("Edición", self)
        tb.setObjectName("tb_edit")
        tb.setMovable(True)

        self._act_phase = QAction("Editar", self)
        self._act_phase.setToolTip("Alternar entre creación y edición")
        self._act_phase.setShortcut(QKeySequence("E"))
        self._act_phase.triggered.connect(self._action_toggle_phase)
        tb.addAction(self._act_phase)

        act_undo = QAction("Deshacer punto", self)
        act_undo.setToolTip("Quitar el último punto")
        act_undo.setShortcut(QKeySequence(QKeySequence.StandardKey.Undo))
        act_undo.triggered.connect(self._action_undo_last)
        tb.addAction(act_undo)

        act_clear = QAction("Limpiar", self)
        act_clear.setToolTip("Borrar todos los puntos y volver a creación")
        act_clear.triggered.connect(self._action_clear)
        tb.addAction(act_clear)

        act_fit = QAction("Encuadrar", self)
        act_fit.setToolTip("Encuadrar la forma en la vista")
        act_fit.setShortcut(QKeySequence("F"))
        act_fit.triggered.connect(lambda: self._view.fit_to_frame())
        tb.addAction(act_fit)

        self.addToolBar(tb)

    # ----------------------------
    # Acciones
    # ----------------------------
    def _action_toggle_phase(self) -> None:
        phase = self._editor.toggle_phase()
        self.statusBar().showMessage(f"Fase: {phase.value}", 2000)

    def _action_undo_last(self) -> None:
        if self._editor.undo_last() is None:
            self.statusBar().showMessage("No hay puntos para quitar", 2000)

    def _action_clear(self) -> None:
        self._editor.reset()

    # ----------------------------
    # Slots
    # ----------------------------
    def _on_pointer_event(self, event: PointerEvent) -> None:
        try:
            self._editor.handle_event(event)
        except Exception:
            # Nunca dejar que un error de edición tumbe el event loop de Qt.
            log.exception("Error procesando evento de puntero: %s", event)
            return
        if self._editor.refresh_pending:
            self._flush_timer.start()

    def _on_cursor_moved(self, geo: LatLng | None) -> None:
        self._cursor_label.setText("" if geo is None else f"{geo.lat:.6f}, {geo.lng:.6f}")

    def _update_status(self) -> None:
        phase = self._store.phase
        self._act_phase.setText("Crear" if phase == EditingPhase.EDITING else "Editar")
        self._status_label.setText(f"Fase: {phase.value.upper()} | Puntos: {len(self._store)}")
        self._view.setToolTip(HINT_EDITING if phase == EditingPhase.EDITING else HINT_CREATING)

    # ----------------------------
    # UI state persistente (layout)
    # ----------------------------
    def closeEvent(self, event: QCloseEvent) -> None:
        self._flush_timer.stop()
        self._persist_ui_state()
        self._editor.dispose()
        event.accept()

    def _restore_ui_state(self) -> None:
        try:
            if self._settings.ui_main_geometry_b64:
                self.restoreGeometry(base64.b64decode(self._settings.ui_main_geometry_b64.encode("ascii")))
            if self._settings.ui_main_state_b64:
                self.restoreState(base64.b64decode(self._settings.ui_main_state_b64.encode("ascii")))
        except (binascii.Error, ValueError):
            log.debug("UI state inválido; se ignora", exc_info=True)

    def _persist_ui_state(self) -> None:
        self._settings.ui_main_geometry_b64 = base64.b64encode(bytes(self.saveGeometry())).decode("ascii")
        self._settings.ui_main_state_b64 = base64.b64encode(bytes(self.saveState())).decode("ascii")
        if not self._settings.save():
            log.warning("No se pudieron guardar los settings de UI")
