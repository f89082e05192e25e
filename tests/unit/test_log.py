"""Unit tests for pme.utils.log."""

import logging

from pme.utils import log as log_mod


def test_env_level_overrides(monkeypatch):
    monkeypatch.setenv(log_mod.ENV_LOG_LEVEL, "debug")
    assert log_mod._resolve_level(logging.INFO) == logging.DEBUG


def test_unknown_env_level_keeps_default(monkeypatch):
    monkeypatch.setenv(log_mod.ENV_LOG_LEVEL, "ruidoso")
    assert log_mod._resolve_level(logging.WARNING) == logging.WARNING


def test_setup_is_idempotent(monkeypatch, tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setattr(log_mod, "_configured", False)
    monkeypatch.delenv(log_mod.ENV_LOG_LEVEL, raising=False)
    try:
        log_mod.setup_logging(tmp_path / "logs")
        added = [h for h in root.handlers if h not in saved_handlers]
        log_mod.setup_logging(tmp_path / "otros")
        assert [h for h in root.handlers if h not in saved_handlers] == added
        assert len(added) == 2
        assert (tmp_path / "logs" / log_mod.LOG_FILENAME).exists()
        assert not (tmp_path / "otros").exists()
    finally:
        for h in root.handlers[:]:
            if h not in saved_handlers:
                root.removeHandler(h)
                h.close()
        root.setLevel(saved_level)
