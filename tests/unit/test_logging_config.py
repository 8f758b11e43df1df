from __future__ import annotations

import logging
from pathlib import Path

from kuna_client.logging_config import setup_logging


def test_setup_logging_writes_file_and_replaces_handlers(tmp_path: Path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_path = setup_logging("DEBUG", log_file=tmp_path / "logs" / "kuna.log")
        assert log_path == tmp_path / "logs" / "kuna.log"
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("kuna_client.test").info("hello %s", "world")
        for h in root.handlers:
            h.flush()
        text = log_path.read_text(encoding="utf-8")
        assert "INFO kuna_client.test - hello world" in text

        assert setup_logging("bogus") is None
        assert root.level == logging.INFO
        assert len(root.handlers) == 1
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
