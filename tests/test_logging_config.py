from __future__ import annotations

import logging
from pathlib import Path

from admin_engine.logging_config import setup_logging


def _reset() -> None:
    for name in ("admin_engine", "gui", "gova"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)


def test_setup_logging_is_idempotent() -> None:
    try:
        setup_logging(level=logging.DEBUG)
        setup_logging(level=logging.DEBUG)

        for name in ("admin_engine", "gui", "gova"):
            logger = logging.getLogger(name)
            assert len(logger.handlers) == 1
            assert logger.level == logging.DEBUG
    finally:
        _reset()


def test_setup_logging_writes_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "gova.log"
    try:
        setup_logging(level=logging.INFO, log_file=str(log_file))
        logging.getLogger("gova.cli").warning("hello from the cli")
        for handler in logging.getLogger("gova").handlers:
            handler.flush()
    finally:
        _reset()

    text = log_file.read_text(encoding="utf-8")
    assert "Logging initialized." in text
    assert "gova.cli - WARNING - hello from the cli" in text


def test_repeat_setup_closes_replaced_file_handler(tmp_path: Path) -> None:
    try:
        setup_logging(level=logging.INFO, log_file=str(tmp_path / "first.log"))
        first = [h for h in logging.getLogger("gova").handlers if isinstance(h, logging.FileHandler)]
        assert len(first) == 1
        assert first[0].stream is not None

        setup_logging(level=logging.INFO, log_file=str(tmp_path / "second.log"))

        assert first[0].stream is None
        current = logging.getLogger("gova").handlers
        assert first[0] not in current
        assert any(isinstance(h, logging.FileHandler) for h in current)
    finally:
        _reset()
