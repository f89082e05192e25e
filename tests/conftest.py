"""Shared pytest fixtures for the PME test suite.

Fixtures:
    store: empty VertexStore in creating phase
    square_points: unit square as LatLng list
    fake_clock: manually advanced monotonic clock (seconds)
    surface: RenderSurface that records every frame it receives
    editor: PolygonEditor wired to store + surface + fake_clock (16 ms throttle)
    editing_square: editor holding the unit square, already in editing phase

Markers:
    qt: needs PySide6 (runs with QT_QPA_PLATFORM=offscreen)
"""

import pytest

from pme.core.editing_phase import EditingPhase
from pme.core.editor import PolygonEditor
from pme.core.models import LatLng
from pme.core.render import RenderFrame
from pme.core.vertex_store import VertexStore


class FakeClock:
    """Monotonic clock under test control."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float) -> None:
        self.now += ms / 1000.0


class RecordingSurface:
    """RenderSurface that keeps every frame pushed by the editor."""

    def __init__(self):
        self.frames: list[RenderFrame] = []

    def render_frame(self, frame: RenderFrame) -> None:
        self.frames.append(frame)

    @property
    def last(self) -> RenderFrame:
        return self.frames[-1]


@pytest.fixture
def store():
    return VertexStore()


@pytest.fixture
def square_points():
    """Unit square, counter-clockwise in (lat, lng)."""
    return [LatLng(0.0, 0.0), LatLng(1.0, 0.0), LatLng(1.0, 1.0), LatLng(0.0, 1.0)]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def editor(store, surface, fake_clock):
    ed = PolygonEditor(store, surface, throttle_ms=16.0, clock=fake_clock)
    yield ed
    ed.dispose()


@pytest.fixture
def editing_square(editor, store, square_points):
    store.set_points(square_points)
    store.set_phase(EditingPhase.EDITING)
    return editor
