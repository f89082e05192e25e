# File: pme/utils/errors.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Errores tipados del proyecto.
# Notes: El núcleo de edición no lanza; estos errores solo salen al decodificar modelos/settings.
from __future__ import annotations


class PmeError(Exception):
    """Error base del proyecto."""


class PmeValidationError(PmeError):
    """Error de validación (input/dict/estructura)."""
