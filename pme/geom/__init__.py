"""Shape geometry for PME.

Pure functions over LatLng sequences (midpoints, render interleaving and
point-in-shape). Used by the editor core; the Qt host never calls it directly.
"""

from __future__ import annotations

from pme.geom.shape_geometry import (
    compute_midpoints,
    interleave,
    midpoint,
    point_in_shape,
    segment_count,
)

__all__ = [
    "compute_midpoints",
    "interleave",
    "midpoint",
    "point_in_shape",
    "segment_count",
]
