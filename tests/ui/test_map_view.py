"""Qt tests for pme.ui.map_view.MapView (offscreen)."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
pytest.importorskip("PySide6")

from PySide6.QtCore import QEvent, QPoint, QPointF, Qt  # noqa: E402
from PySide6.QtGui import QMouseEvent  # noqa: E402
from PySide6.QtTest import QTest  # noqa: E402
from PySide6.QtWidgets import QApplication, QGraphicsEllipseItem, QGraphicsPathItem, QGraphicsPolygonItem  # noqa: E402

from pme.core.editing_phase import EditingPhase  # noqa: E402
from pme.core.editor import PolygonEditor  # noqa: E402
from pme.core.models import LatLng  # noqa: E402
from pme.core.render import MarkerRole, MarkerTarget, PointerKind  # noqa: E402
from pme.core.vertex_store import VertexStore  # noqa: E402
from pme.ui.map_view import MapView  # noqa: E402

pytestmark = pytest.mark.qt


@pytest.fixture(scope="module")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def view(qapp):
    v = MapView(px_per_degree=100.0, hit_radius_px=10)
    v.resize(400, 300)
    v.center_on_geo(LatLng(0.5, 0.5))
    yield v
    v.deleteLater()


@pytest.fixture
def wired(view):
    store = VertexStore([(0, 0), (1, 0), (1, 1), (0, 1)], phase=EditingPhase.EDITING)
    editor = PolygonEditor(store, view, throttle_ms=0)
    events = []
    view.pointer_event.connect(events.append)
    yield store, editor, events
    editor.dispose()


def _items_of(view, cls):
    return [it for it in view.scene().items() if type(it) is cls]


def _vp(view, geo):
    return view.mapFromScene(view.scene_from_geo(geo))


def test_projection_roundtrip(view):
    p = LatLng(-34.6, -58.4)
    back = view.geo_from_scene(view.scene_from_geo(p))
    assert back.lat == pytest.approx(p.lat)
    assert back.lng == pytest.approx(p.lng)


def test_north_is_up(view):
    assert view.scene_from_geo(LatLng(1, 0)).y() < view.scene_from_geo(LatLng(0, 0)).y()


def test_render_frame_builds_items(view, wired):
    assert len(_items_of(view, QGraphicsPolygonItem)) == 1
    assert len(_items_of(view, QGraphicsEllipseItem)) == 8
    assert view.frame is not None
    assert view.frame.phase == EditingPhase.EDITING


def test_open_shape_is_stroked_path(view, qapp):
    store = VertexStore([(0, 0), (1, 0)])
    editor = PolygonEditor(store, view)
    assert _items_of(view, QGraphicsPolygonItem) == []
    assert len(_items_of(view, QGraphicsPathItem)) == 1
    assert len(_items_of(view, QGraphicsEllipseItem)) == 2
    editor.dispose()


def test_hit_test_prefers_vertices(view, wired):
    assert view.hit_test(_vp(view, LatLng(1, 1))) == MarkerTarget(MarkerRole.VERTEX, 2)
    assert view.hit_test(_vp(view, LatLng(1, 0.5))) == MarkerTarget(MarkerRole.MIDPOINT, 1)


def test_hit_test_misses_background(view, wired):
    assert view.hit_test(_vp(view, LatLng(0.5, 0.5))) is None


def test_fit_to_frame(view, wired):
    assert view.fit_to_frame() is True


def test_click_on_background_emits_tap(view, wired):
    _, _, events = wired
    QTest.mouseClick(view.viewport(), Qt.LeftButton, Qt.NoModifier, _vp(view, LatLng(0.5, 0.5)))
    taps = [e for e in events if e.kind == PointerKind.TAP]
    assert len(taps) == 1
    assert taps[0].target is None
    assert taps[0].geo.lat == pytest.approx(0.5, abs=0.02)


def test_right_click_on_vertex_is_long_press(view, wired):
    store, _, events = wired
    QTest.mouseClick(view.viewport(), Qt.RightButton, Qt.NoModifier, _vp(view, LatLng(0, 1)))
    presses = [e for e in events if e.kind == PointerKind.LONG_PRESS]
    assert presses[0].target == MarkerTarget(MarkerRole.VERTEX, 3)


def test_setters_clamp(view):
    view.set_hit_radius_px(0)
    view.set_long_press_ms(-5)
    assert view.hit_test(QPoint(0, 0)) is None


def _mouse(view, etype, pos, button, buttons):
    local = QPointF(pos)
    glob = QPointF(view.viewport().mapToGlobal(pos))
    return QMouseEvent(etype, local, glob, button, buttons, Qt.NoModifier)


def _press_move_release(view, start, end):
    view.mousePressEvent(_mouse(view, QEvent.MouseButtonPress, start, Qt.LeftButton, Qt.LeftButton))
    view.mouseMoveEvent(_mouse(view, QEvent.MouseMove, end, Qt.NoButton, Qt.LeftButton))
    view.mouseReleaseEvent(_mouse(view, QEvent.MouseButtonRelease, end, Qt.LeftButton, Qt.NoButton))


def test_background_drag_is_not_a_tap(view):
    store = VertexStore()
    editor = PolygonEditor(store, view)
    events = []
    view.pointer_event.connect(events.append)
    view.pointer_event.connect(editor.handle_event)

    start = _vp(view, LatLng(0.5, 0.5))
    _press_move_release(view, start, start + QPoint(40, 0))

    assert [e.kind for e in events] == []
    assert store.is_empty
    editor.dispose()


def test_small_jitter_on_background_still_taps(view):
    events = []
    view.pointer_event.connect(events.append)
    start = _vp(view, LatLng(0.5, 0.5))
    _press_move_release(view, start, start + QPoint(1, 0))
    assert [e.kind for e in events] == [PointerKind.TAP]


def test_marker_drag_emits_drag_sequence(view, wired):
    store, editor, events = wired
    view.pointer_event.connect(editor.handle_event)
    start = _vp(view, LatLng(1, 1))
    _press_move_release(view, start, start + QPoint(30, 0))
    kinds = [e.kind for e in events]
    assert kinds == [PointerKind.DRAG_START, PointerKind.DRAG_UPDATE, PointerKind.DRAG_END]
    assert events[0].target == MarkerTarget(MarkerRole.VERTEX, 2)
    assert store.points[2].lng > 1.0
