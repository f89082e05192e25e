# File: pme/core/settings.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Preferencias de usuario (JSON) + project settings (pme_settings.json -> env vars).
# Notes: No depende de Qt; guarda en ~/.pme/settings.json. Nunca rompe el arranque.
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from pme.core.editing_phase import EditingPhase, coerce_editing_phase
from pme.core.models import EditorStyle
from pme.core.version import (
    DEFAULT_HIT_RADIUS_PX,
    DEFAULT_LONG_PRESS_MS,
    DEFAULT_THROTTLE_MS,
    SETTINGS_SCHEMA_VERSION,
)
from pme.utils.errors import PmeValidationError

log = logging.getLogger(__name__)

# Rangos aceptados (se clampa, no se rechaza).
THROTTLE_MS_RANGE = (0.0, 1000.0)
LONG_PRESS_MS_RANGE = (100, 5000)
HIT_RADIUS_PX_RANGE = (2, 64)

ENV_THROTTLE_MS = "PME_THROTTLE_MS"
ENV_LONG_PRESS_MS = "PME_LONG_PRESS_MS"
ENV_HIT_RADIUS_PX = "PME_HIT_RADIUS_PX"
ENV_INITIAL_PHASE = "PME_INITIAL_PHASE"
ENV_BORDER_WIDTH = "PME_STYLE_BORDER_WIDTH"


def settings_dir() -> Path:
    """Carpeta de settings del usuario (ruta explícita, sin QStandardPaths)."""
    return Path.home() / ".pme"


def settings_path() -> Path:
    return settings_dir() / "settings.json"


# ------------------------------
# Project settings (repo-local)
# ------------------------------
# Defaults reproducibles por proyecto (no por usuario) sin tocar el código.
# Archivo esperado: pme_settings.json en el CWD o en algún padre.
PROJECT_SETTINGS_FILENAME = "pme_settings.json"


def find_project_settings_path(start: Path | None = None) -> Path | None:
    """Busca pme_settings.json subiendo desde start (o CWD)."""
    start = (start or Path.cwd()).resolve()
    for p in (start, *start.parents):
        candidate = p / PROJECT_SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_project_settings(start: Path | None = None, *, logger: logging.Logger | None = None) -> Dict[str, Any]:
    """Carga el JSON de project settings. Devuelve {} si no existe o es inválido."""
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except (OSError, ValueError) as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}


def _deep_get(d: Dict[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def apply_project_settings(
    start: Path | None = None,
    *,
    logger: logging.Logger | None = None,
    prefer_env: bool = True,
) -> Dict[str, Any]:
    """Carga pme_settings.json (si existe) y lo vuelca en variables de entorno PME_*.

    - Si `prefer_env=True`, una env var ya seteada NO se pisa.
    - Si `prefer_env=False`, el JSON pisa la env var.

    Devuelve un dict con los valores aplicados desde JSON (para logging/debug).
    """
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}
    data = load_project_settings(start, logger=_log)
    if not data:
        return {}

    applied: Dict[str, Any] = {}

    def _set_env(key: str, value: Any) -> None:
        if prefer_env and os.environ.get(key):
            return
        os.environ[key] = str(value)

    throttle = _deep_get(data, "editor.throttle_ms")
    if isinstance(throttle, (int, float)) and not isinstance(throttle, bool):
        lo, hi = THROTTLE_MS_RANGE
        if lo <= float(throttle) <= hi:
            applied["editor.throttle_ms"] = float(throttle)
            _set_env(ENV_THROTTLE_MS, float(throttle))

    long_press = _deep_get(data, "editor.long_press_ms")
    if isinstance(long_press, int) and not isinstance(long_press, bool):
        lo, hi = LONG_PRESS_MS_RANGE
        if lo <= long_press <= hi:
            applied["editor.long_press_ms"] = long_press
            _set_env(ENV_LONG_PRESS_MS, long_press)

    hit = _deep_get(data, "editor.hit_radius_px")
    if isinstance(hit, int) and not isinstance(hit, bool):
        lo, hi = HIT_RADIUS_PX_RANGE
        if lo <= hit <= hi:
            applied["editor.hit_radius_px"] = hit
            _set_env(ENV_HIT_RADIUS_PX, hit)

    phase = _deep_get(data, "editor.initial_phase")
    if isinstance(phase, str) and phase.strip().lower() in {p.value for p in EditingPhase}:
        applied["editor.initial_phase"] = phase.strip().lower()
        _set_env(ENV_INITIAL_PHASE, phase.strip().lower())

    bw = _deep_get(data, "style.border_width")
    if isinstance(bw, (int, float)) and not isinstance(bw, bool) and 0.0 <= float(bw) <= 32.0:
        applied["style.border_width"] = float(bw)
        _set_env(ENV_BORDER_WIDTH, float(bw))

    if applied:
        _log.info("Project settings aplicados desde %s: %s", p, applied)
    return applied


# ------------------------------
# Env helpers (tolerantes)
# ------------------------------
def env_int(name: str, default: int, *, min_value: int, max_value: int) -> int:
    raw = os.environ.get(name)
    if raw is None or str(raw).strip() == "":
        return int(default)
    return _coerce_int(str(raw).strip(), min_value, max_value, default)


def env_float(name: str, default: float, *, min_value: float, max_value: float) -> float:
    raw = os.environ.get(name)
    if raw is None or str(raw).strip() == "":
        return float(default)
    return _coerce_float(str(raw).strip(), min_value, max_value, default)


@dataclass
class AppSettings:
    """Preferencias persistentes del usuario.

    Precedencia al cargar: settings.json > env PME_* (project settings) > defaults.
    """

    throttle_ms: float = DEFAULT_THROTTLE_MS
    long_press_ms: int = DEFAULT_LONG_PRESS_MS
    hit_radius_px: int = DEFAULT_HIT_RADIUS_PX
    initial_phase: EditingPhase = EditingPhase.CREATING
    style: EditorStyle = field(default_factory=EditorStyle)

    # UI (Qt): se guardan como base64 para no depender de Qt acá.
    ui_main_geometry_b64: str = ""
    ui_main_state_b64: str = ""

    @classmethod
    def from_env(cls) -> "AppSettings":
        out = cls()
        out.throttle_ms = env_float(ENV_THROTTLE_MS, out.throttle_ms, min_value=THROTTLE_MS_RANGE[0], max_value=THROTTLE_MS_RANGE[1])
        out.long_press_ms = env_int(ENV_LONG_PRESS_MS, out.long_press_ms, min_value=LONG_PRESS_MS_RANGE[0], max_value=LONG_PRESS_MS_RANGE[1])
        out.hit_radius_px = env_int(ENV_HIT_RADIUS_PX, out.hit_radius_px, min_value=HIT_RADIUS_PX_RANGE[0], max_value=HIT_RADIUS_PX_RANGE[1])
        out.initial_phase = coerce_editing_phase(os.environ.get(ENV_INITIAL_PHASE), out.initial_phase)
        bw = env_float(ENV_BORDER_WIDTH, out.style.border_width, min_value=0.0, max_value=32.0)
        out.style = out.style.copy_with(border_width=bw)
        return out

    # Cargar settings desde disco (tolerante a errores).
    @classmethod
    def load(cls) -> "AppSettings":
        out = cls.from_env()
        p = settings_path()
        try:
            if not p.exists():
                return out
            data = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            log.debug("No se pudieron cargar settings: %s", p, exc_info=True)
            return out
        if not isinstance(data, dict):
            return out

        out.throttle_ms = _coerce_float(data.get("throttle_ms", out.throttle_ms), *THROTTLE_MS_RANGE, out.throttle_ms)
        out.long_press_ms = _coerce_int(data.get("long_press_ms", out.long_press_ms), *LONG_PRESS_MS_RANGE, out.long_press_ms)
        out.hit_radius_px = _coerce_int(data.get("hit_radius_px", out.hit_radius_px), *HIT_RADIUS_PX_RANGE, out.hit_radius_px)
        out.initial_phase = coerce_editing_phase(data.get("initial_phase"), out.initial_phase)

        style_raw = data.get("style")
        if isinstance(style_raw, dict):
            try:
                out.style = EditorStyle.from_dict({**out.style.to_dict(), **style_raw})
            except PmeValidationError as e:
                log.warning("Estilo inválido en %s, se usan defaults: %s", p, e)

        out.ui_main_geometry_b64 = str(data.get("ui_main_geometry_b64", "") or "")
        out.ui_main_state_b64 = str(data.get("ui_main_state_b64", "") or "")
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": SETTINGS_SCHEMA_VERSION,
            "throttle_ms": _coerce_float(self.throttle_ms, *THROTTLE_MS_RANGE, DEFAULT_THROTTLE_MS),
            "long_press_ms": _coerce_int(self.long_press_ms, *LONG_PRESS_MS_RANGE, DEFAULT_LONG_PRESS_MS),
            "hit_radius_px": _coerce_int(self.hit_radius_px, *HIT_RADIUS_PX_RANGE, DEFAULT_HIT_RADIUS_PX),
            "initial_phase": coerce_editing_phase(self.initial_phase).value,
            "style": self.style.to_dict(),
            "ui_main_geometry_b64": str(self.ui_main_geometry_b64 or ""),
            "ui_main_state_b64": str(self.ui_main_state_b64 or ""),
        }

    # Guardar settings en disco (no debe romper la app).
    def save(self) -> bool:
        try:
            settings_dir().mkdir(parents=True, exist_ok=True)
            settings_path().write_text(
                json.dumps(self.to_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            return True
        except OSError:
            log.debug("No se pudieron guardar settings", exc_info=True)
            return False


def _coerce_int(v: Any, min_v: int, max_v: int, default: int) -> int:
    try:
        n = int(v)
    except (TypeError, ValueError):
        return int(default)
    return max(min_v, min(max_v, n))


def _coerce_float(v: Any, min_v: float, max_v: float, default: float) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return float(default)
    if x != x:  # NaN
        return float(default)
    return max(float(min_v), min(float(max_v), x))
