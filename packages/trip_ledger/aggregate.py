"""Per-currency dashboard aggregation."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from .models import Currency, CurrencyStats, DashboardData, Transaction, TransactionType, zero_stats
from .normalize import parse_timestamp

_NO_TIMESTAMP = datetime.min.replace(tzinfo=UTC)


def _sort_key(tx: Transaction) -> tuple[str, datetime]:
    return tx.effective_date, parse_timestamp(tx.created_at) or _NO_TIMESTAMP


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Order by effective date, then ``created_at``, newest first.

    Records without a usable ``created_at`` come last within their day; exact
    ties keep input order.
    """

    # ISO dates compare correctly as strings; ``sorted`` stays stable with reverse=True.
    return sorted(transactions, key=_sort_key, reverse=True)


def empty_dashboard() -> DashboardData:
    """The well-formed "no data" dashboard: zero stats for every currency."""

    return DashboardData(transactions=(), stats=zero_stats(), sub_categories=())


def aggregate(transactions: Iterable[Transaction]) -> DashboardData:
    """Build :class:`DashboardData` from normalized transactions.

    Income and expense are summed per currency first; each balance is computed
    once from the final sums.
    """

    ordered = sort_newest_first(transactions)

    totals: dict[Currency, list[float]] = {c: [0.0, 0.0] for c in Currency}
    sub_categories: set[str] = set()
    for tx in ordered:
        bucket = totals[tx.currency]
        if tx.type is TransactionType.INCOME:
            bucket[0] += tx.amount
        else:
            bucket[1] += tx.amount
        if tx.sub_category:
            sub_categories.add(tx.sub_category)

    stats = {
        c: CurrencyStats.from_totals(income, expense) for c, (income, expense) in totals.items()
    }
    return DashboardData(
        transactions=tuple(ordered),
        stats=stats,
        sub_categories=tuple(sorted(sub_categories)),
    )


__all__ = ["aggregate", "empty_dashboard", "sort_newest_first"]
