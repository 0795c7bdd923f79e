"""Pytest configuration for test isolation.

The CLI reads ``BANK_STATEMENTS_*`` variables (and a ``.env`` in the working
directory) to pick defaults such as the log level or the accounting-year
reference date. A developer's shell or ``.env`` must not leak into tests, so
each test runs from a clean temporary working directory with those variables
removed, and the package logger is reset afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from bank_statements import logging_setup

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "BANK_STATEMENTS_LOG_LEVEL",
        "BANK_STATEMENTS_CSV_SEPARATOR",
        "BANK_STATEMENTS_REFERENCE_DATE",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)

    yield

    logger = logging.getLogger("bank_statements")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR
