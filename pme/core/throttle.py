# File: pme/core/throttle.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Throttle de refrescos durante drags (coalesce por ventana de tiempo).
# Notes: Sin timers ni threads: timestamp del último refresco aplicado + flush forzado al soltar.
from __future__ import annotations

import time
from typing import Callable, Optional

Clock = Callable[[], float]


class DragThrottle:
    """Deja pasar como máximo un refresco por ventana de `interval_ms`.

    - interval_ms <= 0: todo pasa (sin throttle).
    - Lo que no pasa queda como `pending`; el que llama decide cuándo forzar
      (drag-end) con `force()`.
    - `clock` devuelve segundos monotónicos (inyectable en tests).
    """

    def __init__(self, interval_ms: float = 16.0, *, clock: Optional[Clock] = None) -> None:
        self._interval_s = max(0.0, float(interval_ms)) / 1000.0
        self._clock: Clock = clock or time.monotonic
        self._last_applied: Optional[float] = None
        self._pending = False

    @property
    def interval_ms(self) -> float:
        return self._interval_s * 1000.0

    @property
    def pending(self) -> bool:
        return self._pending

    def set_interval_ms(self, interval_ms: float) -> None:
        self._interval_s = max(0.0, float(interval_ms)) / 1000.0

    def should_apply(self) -> bool:
        """True si el refresco puede aplicarse ahora (y lo registra como aplicado)."""
        now = self._clock()
        if (
            self._interval_s <= 0.0
            or self._last_applied is None
            or (now - self._last_applied) >= self._interval_s
        ):
            self._last_applied = now
            self._pending = False
            return True
        self._pending = True
        return False

    def force(self) -> None:
        """Registra un refresco incondicional (drag-end)."""
        self._last_applied = self._clock()
        self._pending = False

    def reset(self) -> None:
        self._last_applied = None
        self._pending = False
