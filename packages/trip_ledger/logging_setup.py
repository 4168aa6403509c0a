"""Logging for the ``trip_ledger`` package.

Library modules call ``get_logger("trip_ledger.<module>")`` and never attach
handlers. Only the CLI calls :func:`configure_logging`, which installs one
stderr handler on the ``"trip_ledger"`` logger. Dropped webhook records are
logged at DEBUG, so ``trip-ledger -v`` (or ``TRIP_LEDGER_LOG_LEVEL=DEBUG``)
shows them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

LOG_LEVEL_ENV = "TRIP_LEDGER_LOG_LEVEL"

_PKG_LOGGER_NAME = "trip_ledger"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_handler: logging.Handler | None = None


def level_from_env(environ: Mapping[str, str] | None = None) -> int:
    """Resolve ``TRIP_LEDGER_LOG_LEVEL`` to a level number.

    Accepts level names in any case or plain numbers; unset or unknown values
    give ``logging.INFO``.
    """

    raw = (os.environ if environ is None else environ).get(LOG_LEVEL_ENV, "").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelNamesMapping().get(raw)
    return level if level is not None else logging.INFO


def configure_logging(*, verbose: bool = False) -> None:
    """Install the package stderr handler, replacing one from an earlier call.

    ``verbose`` forces DEBUG; otherwise the level comes from the environment.
    """

    global _handler
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if h is _handler or isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    level = logging.DEBUG if verbose else level_from_env()
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(level)
    # Keep records off the root logger.
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger; the package logger gets a NullHandler until configured."""

    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "get_logger", "level_from_env"]
