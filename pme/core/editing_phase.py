# File: pme/core/editing_phase.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Fases del editor de polígonos (creación / edición).
# Notes: La fase define si la forma está cerrada (aristas con wrap-around).

from __future__ import annotations

from enum import Enum


class EditingPhase(str, Enum):
    """Fase activa del editor.

    - creating: tap en el mapa agrega vértices; la forma es abierta.
      Tap en el vértice inicial (con >= 3 vértices) cierra el polígono.
    - editing: forma cerrada; arrastrar vértices, arrastrar midpoints para
      insertar, long-press para borrar, long-press adentro para mover todo.
    """

    CREATING = "creating"
    EDITING = "editing"

    @property
    def closed(self) -> bool:
        return self is EditingPhase.EDITING

    def toggled(self) -> "EditingPhase":
        return EditingPhase.CREATING if self is EditingPhase.EDITING else EditingPhase.EDITING


def coerce_editing_phase(v: object, default: EditingPhase = EditingPhase.CREATING) -> EditingPhase:
    if isinstance(v, EditingPhase):
        return v
    s = str(v or "").strip().lower()
    for p in EditingPhase:
        if p.value == s:
            return p
    return default
