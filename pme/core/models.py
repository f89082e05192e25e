# File: pme/core/models.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Modelos de datos: coordenada geográfica (LatLng) y estilo del editor.
# Notes: Valores inmutables (frozen). Los from_dict validan y lanzan PmeValidationError.
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Sequence, Tuple

from pme.utils.errors import PmeValidationError

RGBA = Tuple[int, int, int, int]
Size = Tuple[float, float]


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    @staticmethod
    def coerce(p: "LatLng | Sequence[float]") -> "LatLng":
        """Acepta LatLng o cualquier par (lat, lng)."""
        if isinstance(p, LatLng):
            return p
        try:
            lat, lng = p  # type: ignore[misc]
        except (TypeError, ValueError) as e:
            raise PmeValidationError(f"Coordenada inválida: {p!r}") from e
        return LatLng(_as_float(lat, "lat"), _as_float(lng, "lng"))

    def offset(self, lat_offset: float, lng_offset: float) -> "LatLng":
        return LatLng(self.lat + lat_offset, self.lng + lng_offset)

    def to_dict(self) -> dict[str, Any]:
        return {"lat": float(self.lat), "lng": float(self.lng)}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "LatLng":
        if not isinstance(d, dict):
            raise PmeValidationError("LatLng inválido: se esperaba dict")
        missing = [k for k in ("lat", "lng") if k not in d]
        if missing:
            raise PmeValidationError(f"LatLng inválido: faltan claves: {', '.join(missing)}")
        return LatLng(_as_float(d["lat"], "lat"), _as_float(d["lng"], "lng"))


# Defaults tomados del rojo Material (borde) y rojo 50% (relleno).
DEFAULT_BORDER_COLOR: RGBA = (244, 67, 54, 255)
DEFAULT_FILL_COLOR: RGBA = (255, 0, 0, 128)


@dataclass(frozen=True)
class EditorStyle:
    """Estilo visual del polígono/polilínea y de los marcadores.

    Dato pasivo: no tiene comportamiento más allá de derivar copias.
    fill_color se ignora mientras la forma está abierta.
    """

    border_width: float = 2.0
    border_color: RGBA = DEFAULT_BORDER_COLOR
    fill_color: RGBA = DEFAULT_FILL_COLOR
    point_size: Size = (24.0, 24.0)
    midpoint_size: Size = (20.0, 20.0)

    def copy_with(self, **overrides: Any) -> "EditorStyle":
        """Nuevo estilo con algunos campos pisados (el original no cambia)."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise PmeValidationError(f"EditorStyle: campos desconocidos: {', '.join(unknown)}")
        clean = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **clean)

    def to_dict(self) -> dict[str, Any]:
        return {
            "border_width": float(self.border_width),
            "border_color": [int(c) for c in self.border_color],
            "fill_color": [int(c) for c in self.fill_color],
            "point_size": [float(v) for v in self.point_size],
            "midpoint_size": [float(v) for v in self.midpoint_size],
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "EditorStyle":
        if not isinstance(d, dict):
            raise PmeValidationError("style inválido: se esperaba dict")
        base = EditorStyle()
        width = _as_float(d.get("border_width", base.border_width), "style.border_width")
        if width < 0:
            raise PmeValidationError("style.border_width inválido: debe ser >= 0")
        return EditorStyle(
            border_width=width,
            border_color=_as_rgba(d.get("border_color", base.border_color), "style.border_color"),
            fill_color=_as_rgba(d.get("fill_color", base.fill_color), "style.fill_color"),
            point_size=_as_size(d.get("point_size", base.point_size), "style.point_size"),
            midpoint_size=_as_size(d.get("midpoint_size", base.midpoint_size), "style.midpoint_size"),
        )


def _as_float(value: Any, field: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise PmeValidationError(f"Campo {field} inválido (float): {value!r}") from e


def _as_rgba(value: Any, field: str) -> RGBA:
    if not (isinstance(value, (list, tuple)) and len(value) in (3, 4)):
        raise PmeValidationError(f"Campo {field} inválido: se espera [r,g,b] o [r,g,b,a]")
    out = []
    for c in value:
        try:
            n = int(c)
        except (TypeError, ValueError) as e:
            raise PmeValidationError(f"Campo {field} inválido (int): {c!r}") from e
        if not 0 <= n <= 255:
            raise PmeValidationError(f"Campo {field} fuera de rango 0..255: {n}")
        out.append(n)
    if len(out) == 3:
        out.append(255)
    return (out[0], out[1], out[2], out[3])


def _as_size(value: Any, field: str) -> Size:
    if not (isinstance(value, (list, tuple)) and len(value) == 2):
        raise PmeValidationError(f"Campo {field} inválido: se espera [w,h]")
    w = _as_float(value[0], f"{field}[0]")
    h = _as_float(value[1], f"{field}[1]")
    if w <= 0 or h <= 0:
        raise PmeValidationError(f"Campo {field} inválido: w/h deben ser > 0")
    return (w, h)
