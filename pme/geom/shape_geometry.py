# File: pme/geom/shape_geometry.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Geometría derivada de la forma: midpoints, secuencia intercalada, punto-en-polígono.
# Notes: Funciones puras, sin estado. No detectan geometría degenerada (duplicados/colineales).
from __future__ import annotations

from typing import Sequence

from pme.core.editing_phase import EditingPhase
from pme.core.models import LatLng


def segment_count(n: int, closed: bool) -> int:
    """Cantidad de aristas: n si la forma cierra, n-1 si es abierta, 0 si n < 2."""
    if n < 2:
        return 0
    return n if closed else n - 1


def midpoint(a: LatLng, b: LatLng) -> LatLng:
    return LatLng(
        a.lat + (b.lat - a.lat) / 2.0,
        a.lng + (b.lng - a.lng) / 2.0,
    )


def compute_midpoints(points: Sequence[LatLng], phase: EditingPhase) -> list[LatLng]:
    """Midpoint de cada arista; la arista último->primero solo si la fase es cerrada."""
    n = len(points)
    return [midpoint(points[i], points[(i + 1) % n]) for i in range(segment_count(n, phase.closed))]


def interleave(vertices: Sequence[LatLng], midpoints: Sequence[LatLng]) -> list[LatLng]:
    """[v0, m0, v1, m1, ...] para render.

    Si hay menos midpoints que vértices (forma abierta) los vértices sobrantes
    van sin midpoint. Menos de 2 vértices -> vacío.
    """
    if len(vertices) < 2:
        return []
    out: list[LatLng] = []
    for i, v in enumerate(vertices):
        out.append(v)
        if i < len(midpoints):
            out.append(midpoints[i])
    return out


def point_in_shape(point: LatLng, shape: Sequence[LatLng]) -> bool:
    """Ray casting (paridad de cruces) sobre (lat, lng).

    Un punto exactamente sobre un vértice da siempre el mismo resultado para
    la misma forma (determinista), pero no se garantiza adentro/afuera.
    """
    n = len(shape)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = shape[i].lat, shape[i].lng
        xj, yj = shape[j].lat, shape[j].lng
        # (yi > y) != (yj > y) garantiza yj != yi: no hay división por cero.
        if (yi > point.lng) != (yj > point.lng):
            x_cross = (xj - xi) * (point.lng - yi) / (yj - yi) + xi
            if point.lat < x_cross:
                inside = not inside
        j = i
    return inside
