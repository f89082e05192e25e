# File: pme/app.py
# Project: PolyMapEditor (PME)
# Version: 0.1.0
# Status: stable
# Date: 2026-10-19
# Purpose: Entry-point de la aplicación.
# Notes: Orden: logging -> project settings (env) -> settings de usuario -> Qt.
from __future__ import annotations

import sys

from PySide6.QtWidgets import QApplication

from pme.core.settings import AppSettings, apply_project_settings
from pme.core.version import APP_SHORT, APP_VERSION
from pme.ui.main_window import MainWindow
from pme.utils.log import get_logger, setup_logging

log = get_logger(__name__)


def main() -> int:
    setup_logging()
    # Project-level defaults (repo-local): pme_settings.json
    apply_project_settings(logger=log, prefer_env=True)
    settings = AppSettings.load()
    app = QApplication(sys.argv)
    w = MainWindow(settings)
    w.show()
    log.info("%s iniciado (v%s), throttle=%.1f ms", APP_SHORT, APP_VERSION, settings.throttle_ms)
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
