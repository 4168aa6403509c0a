"""Pytest configuration shared by the ``trip_ledger`` tests.

Makes ``packages/`` importable without an install and keeps every test away
from the developer's real webhook configuration by clearing the
``TRIP_LEDGER_*`` environment variables.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
# ``packages/`` precedes the repo root so local packages resolve first; the root
# itself makes ``tests.helpers`` importable.
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in list(os.environ):
        if var.startswith("TRIP_LEDGER_"):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("trip_ledger")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
