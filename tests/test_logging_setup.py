# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from taskboard.core.logging_setup import _ConsoleNoiseFilter


def record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "name, level, shown",
    [
        ("taskboard.services.tasks", logging.DEBUG, True),
        ("uvicorn.access", logging.INFO, True),
        ("sqlalchemy.engine", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("redis", logging.ERROR, True),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(record(name, level)) is shown
