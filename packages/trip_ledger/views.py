"""Display-oriented views derived from normalized transactions.

Both chart views cover the base currency (TRY) only; foreign-currency records
are left out rather than converted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from .models import (
    BASE_CURRENCY,
    CategorySlice,
    Transaction,
    TransactionType,
    WeeklyPoint,
)
from .normalize import parse_timestamp

# Sunday first, matching the weekday numbering used by the charts (Sunday=0).
WEEKDAY_LABELS: tuple[str, ...] = ("Paz", "Pzt", "Sal", "Çar", "Per", "Cum", "Cmt")

CATEGORY_COLORS: tuple[str, ...] = ("#f97316", "#3b82f6", "#10b981", "#8b5cf6", "#ec4899")
TOP_CATEGORIES = 5

WEEK_WINDOW = timedelta(days=7)


def _local_tz() -> tzinfo:
    return datetime.now().astimezone().tzinfo or UTC


def _effective_timestamp(tx: Transaction, tz: tzinfo) -> datetime | None:
    if tx.transaction_date:
        try:
            day = date.fromisoformat(tx.transaction_date)
        except ValueError:
            day = None
        if day is not None:
            return datetime.combine(day, time.min, tzinfo=tz)
    if tx.created_at:
        # Naive timestamps are UTC.
        dt = parse_timestamp(tx.created_at)
        return dt.astimezone(tz) if dt is not None else None
    return None


def _sunday_index(dt: datetime) -> int:
    # ``weekday()`` is Monday=0; shift so Sunday=0.
    return (dt.weekday() + 1) % 7


def calculate_weekly_stats(
    transactions: Iterable[Transaction],
    *,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> list[WeeklyPoint]:
    """Income/expense per weekday over the trailing seven days.

    The window starts exactly ``7 * 24`` hours before ``now`` and has no upper
    bound. A dated transaction counts from local midnight of its date; an
    undated one from its ``created_at`` timestamp (naive values are UTC). Always
    returns seven points, Sunday first.
    """

    zone = tz or (now.tzinfo if now is not None and now.tzinfo is not None else _local_tz())
    current = now or datetime.now(zone)
    if current.tzinfo is None:
        current = current.replace(tzinfo=zone)
    window_start = current - WEEK_WINDOW

    income = [0.0] * 7
    expense = [0.0] * 7
    for tx in transactions:
        if tx.currency is not BASE_CURRENCY:
            continue
        ts = _effective_timestamp(tx, zone)
        if ts is None or ts < window_start:
            continue
        day = _sunday_index(ts)
        if tx.type is TransactionType.INCOME:
            income[day] += tx.amount
        else:
            expense[day] += tx.amount

    return [
        WeeklyPoint(name=label, income=income[i], expense=expense[i])
        for i, label in enumerate(WEEKDAY_LABELS)
    ]


def calculate_expense_distribution(transactions: Iterable[Transaction]) -> list[CategorySlice]:
    """Top five expense categories by total, colored by rank.

    Categories past the fifth are dropped, not folded into a remainder slice.
    """

    totals: dict[str, float] = {}
    for tx in transactions:
        if tx.type is not TransactionType.EXPENSE or tx.currency is not BASE_CURRENCY:
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.amount

    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:TOP_CATEGORIES]
    return [
        CategorySlice(name=name, value=value, color=CATEGORY_COLORS[i % len(CATEGORY_COLORS)])
        for i, (name, value) in enumerate(ranked)
    ]


def filter_transactions(
    transactions: Sequence[Transaction],
    *,
    search: str = "",
    type_filter: TransactionType | str = "all",
) -> list[Transaction]:
    """Case-insensitive search over description/category plus an optional type filter."""

    needle = search.strip().casefold()
    wanted: TransactionType | None
    if isinstance(type_filter, TransactionType):
        wanted = type_filter
    elif type_filter.strip().lower() == "all":
        wanted = None
    else:
        wanted = TransactionType(type_filter.strip().upper())

    return [
        tx
        for tx in transactions
        if (wanted is None or tx.type is wanted)
        and (
            not needle
            or needle in tx.description.casefold()
            or needle in tx.category.casefold()
        )
    ]


__all__ = [
    "CATEGORY_COLORS",
    "WEEKDAY_LABELS",
    "calculate_expense_distribution",
    "calculate_weekly_stats",
    "filter_transactions",
]
