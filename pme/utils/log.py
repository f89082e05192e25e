# File: pme/utils/log.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Logging de la app: root logger con salida a consola y a logs/pme.log.
# Notes: Se configura una sola vez (app.main); los módulos solo piden get_logger(__name__).
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FILENAME = "pme.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
ENV_LOG_LEVEL = "PME_LOG_LEVEL"

_configured = False


def _resolve_level(default: int) -> int:
    """PME_LOG_LEVEL=DEBUG|INFO|... gana sobre el nivel pedido por código."""
    name = (os.environ.get(ENV_LOG_LEVEL) or "").strip().upper()
    if not name:
        return default
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default


def _file_handler(log_dir: str | os.PathLike) -> logging.Handler | None:
    path = Path(log_dir)
    try:
        path.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path / LOG_FILENAME, encoding="utf-8")
    except OSError as e:
        # Sin archivo se sigue con consola.
        logging.getLogger(__name__).warning("Log a archivo deshabilitado (%s): %s", path, e)
        return None


def setup_logging(log_dir: str | os.PathLike = "logs", level: int = logging.INFO) -> None:
    """Instala los handlers del root logger. Llamadas repetidas no hacen nada."""
    global _configured
    if _configured:
        return

    level = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    fh = _file_handler(log_dir)
    if fh is not None:
        handlers.append(fh)
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)
        root.addHandler(h)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
