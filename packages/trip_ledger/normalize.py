"""Raw webhook record -> :class:`~trip_ledger.models.Transaction`.

Upstream records are loosely typed: numbers usually arrive as strings, keys
come in snake_case or camelCase depending on which workflow produced them, and
some records are junk left behind by a serialization fault upstream (their
description reads ``"[object Object]"``). Junk is dropped, not reported; each
drop is logged at DEBUG so it can be traced when needed.

Rules
-----
- ``description``: required, non-blank string without the serialization
  artifact.
- ``amount``: parsed like JavaScript ``parseFloat`` (leading numeric prefix);
  must be finite and > 0.
- ``exchange_rate``: same parsing; anything unusable becomes ``None``.
- ``currency``: ``USD`` and ``EUR`` pass through, everything else is ``TRY``.
- ``type``: ``INCOME`` (any case) is income, everything else an expense.
- ``transaction_date``: explicit ISO date field, else the UTC calendar date
  of ``created_at``, else ``""``. Naive timestamps are read as UTC.
- ``category``: blank/missing becomes :data:`DEFAULT_CATEGORY`.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime
from typing import Any

from .logging_setup import get_logger
from .models import BASE_CURRENCY, Currency, RawRecord, Transaction, TransactionType

DEFAULT_CATEGORY = "Diğer"
SERIALIZATION_ARTIFACT = "[object Object]"

_PASSTHROUGH_CURRENCIES = {Currency.USD.value: Currency.USD, Currency.EUR.value: Currency.EUR}

_NUMERIC_PREFIX_RE = re.compile(r"^\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_logger = get_logger("trip_ledger.normalize")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _pick(record: RawRecord, *keys: str) -> Any:
    """Return the first non-``None`` value among ``keys``."""

    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _clean_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def parse_number(value: Any) -> float | None:
    """Parse ``value`` the way ``parseFloat`` does; ``None`` when not a finite number.

    >>> parse_number("500")
    500.0
    >>> parse_number(" 12.5 TL")
    12.5
    >>> parse_number("TL 12") is None
    True
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        m = _NUMERIC_PREFIX_RE.match(value)
        if m is None:
            return None
        number = float(m.group(0))
    else:
        return None
    return number if math.isfinite(number) else None


def _stringify_id(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _normalize_currency(value: Any) -> Currency:
    if isinstance(value, str):
        return _PASSTHROUGH_CURRENCIES.get(value, BASE_CURRENCY)
    return BASE_CURRENCY


def _normalize_type(value: Any) -> TransactionType:
    if isinstance(value, str) and value.strip().upper() == TransactionType.INCOME.value:
        return TransactionType.INCOME
    return TransactionType.EXPENSE


def _iso_date(value: str) -> str:
    # Accept 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM:SS...' and 'YYYY-MM-DD HH:MM:SS'.
    head = value.split()[0].split("T", 1)[0]
    try:
        return date.fromisoformat(head).isoformat()
    except ValueError:
        return ""


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO timestamp into an aware UTC ``datetime``.

    Naive timestamps are taken as UTC. Returns ``None`` when unparseable.
    """

    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_date_of(timestamp: str) -> str:
    """Return the UTC calendar date (``YYYY-MM-DD``) of an ISO timestamp, or ``""``."""

    dt = parse_timestamp(timestamp)
    return dt.date().isoformat() if dt is not None else ""


def _derive_date(explicit: str | None, created_at: str) -> str:
    if explicit:
        day = _iso_date(explicit)
        if day:
            return day
        _logger.debug("ignoring non-ISO transaction date %r", explicit)
    if created_at:
        return utc_date_of(created_at)
    return ""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def normalize_record(raw: Any) -> Transaction | None:
    """Normalize one upstream record, or return ``None`` to signal rejection."""

    if not isinstance(raw, Mapping):
        _logger.debug("dropping non-mapping record: %r", type(raw).__name__)
        return None

    description = raw.get("description")
    if not isinstance(description, str) or not description.strip():
        _logger.debug("dropping record %r: empty description", raw.get("id"))
        return None
    if SERIALIZATION_ARTIFACT in description:
        _logger.debug("dropping record %r: serialized-object description", raw.get("id"))
        return None

    amount = parse_number(raw.get("amount"))
    if amount is None or amount <= 0:
        _logger.debug("dropping record %r: unusable amount %r", raw.get("id"), raw.get("amount"))
        return None

    created_at = _clean_str(_pick(raw, "created_at", "createdAt")) or ""
    explicit_date = _clean_str(_pick(raw, "transaction_date", "transactionDate", "date"))

    return Transaction(
        id=_stringify_id(raw.get("id")),
        amount=amount,
        type=_normalize_type(raw.get("type")),
        category=_clean_str(raw.get("category")) or DEFAULT_CATEGORY,
        sub_category=_clean_str(_pick(raw, "sub_category", "subCategory")),
        description=description,
        currency=_normalize_currency(raw.get("currency")),
        exchange_rate=parse_number(_pick(raw, "exchange_rate", "exchangeRate")),
        transaction_date=_derive_date(explicit_date, created_at),
        created_at=created_at,
        file_url=_clean_str(_pick(raw, "file_url", "fileUrl")),
    )


def normalize_records(records: Iterable[Any]) -> list[Transaction]:
    """Normalize ``records`` in order, skipping rejected ones."""

    out: list[Transaction] = []
    dropped = 0
    for raw in records:
        tx = normalize_record(raw)
        if tx is None:
            dropped += 1
            continue
        out.append(tx)
    if dropped:
        _logger.debug("normalized %d records, dropped %d", len(out), dropped)
    return out


__all__ = [
    "DEFAULT_CATEGORY",
    "SERIALIZATION_ARTIFACT",
    "normalize_record",
    "normalize_records",
    "parse_number",
    "parse_timestamp",
    "utc_date_of",
]
