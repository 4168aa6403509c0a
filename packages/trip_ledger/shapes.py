"""Locate the raw transaction array inside a dashboard webhook payload.

The dashboard webhook has answered in several shapes over time, with no
version field to tell them apart:

1. ``[{"data": [{"transactions": [...]}]}]``
2. ``{"data": [{"transactions": [...]}]}``
3. ``{"transactions": [...]}``
4. ``[{"id": ...}, ...]`` (bare record list)
5. ``[{"transactions": [...]}]``

Rules are tried in that order and the first list found wins. The bare-list
rule sits behind the wrapped list shapes so that a wrapper carrying an ``id``
of its own is never mistaken for a record. Anything unrecognized resolves to
an empty list.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from .logging_setup import get_logger

_logger = get_logger("trip_ledger.shapes")

ShapeRule: TypeAlias = Callable[[Any], list[Any] | None]


def _first(value: Any) -> Any:
    if isinstance(value, list) and value:
        return value[0]
    return None


def _transactions_of(value: Any) -> list[Any] | None:
    if isinstance(value, Mapping):
        txs = value.get("transactions")
        if isinstance(txs, list):
            return txs
    return None


def _data_transactions_of(value: Any) -> list[Any] | None:
    if isinstance(value, Mapping):
        return _transactions_of(_first(value.get("data")))
    return None


def _list_wrapped_data(payload: Any) -> list[Any] | None:
    return _data_transactions_of(_first(payload))


def _object_data(payload: Any) -> list[Any] | None:
    return _data_transactions_of(payload)


def _object_transactions(payload: Any) -> list[Any] | None:
    return _transactions_of(payload)


def _bare_records(payload: Any) -> list[Any] | None:
    head = _first(payload)
    if isinstance(head, Mapping) and "id" in head:
        return payload
    return None


def _list_wrapped_transactions(payload: Any) -> list[Any] | None:
    return _transactions_of(_first(payload))


# Priority order matters; append new shapes at the position they belong.
SHAPE_RULES: tuple[tuple[str, ShapeRule], ...] = (
    ("list[data[0].transactions]", _list_wrapped_data),
    ("data[0].transactions", _object_data),
    ("transactions", _object_transactions),
    ("bare-records", _bare_records),
    ("list[transactions]", _list_wrapped_transactions),
)


def resolve_transactions(payload: Any) -> list[Any]:
    """Return the raw transaction records carried by ``payload``.

    Never raises; an unrecognized payload yields ``[]``.
    """

    for name, rule in SHAPE_RULES:
        found = rule(payload)
        if found is not None:
            _logger.debug("payload matched shape %s (%d records)", name, len(found))
            return list(found)
    _logger.debug("payload matched no known shape (type=%s)", type(payload).__name__)
    return []


__all__ = ["SHAPE_RULES", "resolve_transactions"]
