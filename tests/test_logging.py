"""Tests for jspack.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from jspack.logging import configure_logging, get_logger


def test_get_logger_is_namespaced() -> None:
    assert get_logger().name == "jspack"
    assert get_logger("graph").name == "jspack.graph"


def test_configure_logging_replaces_handlers(tmp_path: Path) -> None:
    configure_logging()
    logger = configure_logging(verbose=True, log_file=tmp_path / "build.log")

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    get_logger("graph").debug("resolved %s", "./a.js")
    for handler in logger.handlers:
        handler.flush()

    contents = (tmp_path / "build.log").read_text(encoding="utf-8")
    assert "jspack.graph: resolved ./a.js" in contents

    configure_logging()
    assert len(logging.getLogger("jspack").handlers) == 1
