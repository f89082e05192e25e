# File: pme/core/markers.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Builders de marcadores (estrategia intercambiable) + implementación default.
# Notes: El editor solo conoce la firma (position, dragging, is_start) -> MarkerVisual.
from __future__ import annotations

from typing import Protocol

from pme.core.models import RGBA, LatLng
from pme.core.render import MarkerVisual

# Paleta Material (azul / verde y sus variantes 700 para "arrastrando").
_BLUE: RGBA = (33, 150, 243, 255)
_BLUE_700: RGBA = (25, 118, 210, 255)
_GREEN: RGBA = (76, 175, 80, 255)
_GREEN_700: RGBA = (56, 142, 60, 255)


class MarkerBuilder(Protocol):
    def __call__(self, position: LatLng, dragging: bool, is_start: bool) -> MarkerVisual:  # pragma: no cover
        ...


def default_point_builder(position: LatLng, dragging: bool, is_start: bool) -> MarkerVisual:
    """Vértice: círculo azul con borde blanco; el inicial (fase creating) en verde.

    `position` queda disponible para builders propios; el default no lo usa.
    """
    if is_start:
        return MarkerVisual(fill=_GREEN_700 if dragging else _GREEN)
    return MarkerVisual(fill=_BLUE_700 if dragging else _BLUE)


def default_midpoint_builder(position: LatLng, dragging: bool, is_start: bool = False) -> MarkerVisual:
    """Midpoint: círculo verde con ícono '+'."""
    return MarkerVisual(fill=_GREEN_700 if dragging else _GREEN, icon="plus")
