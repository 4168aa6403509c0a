"""Data models for ``trip_ledger``.

Normalized records and dashboard aggregates are pydantic models so they can be
dumped straight to the camelCase JSON the dashboard front end consumes
(``model_dump(by_alias=True, mode="json")``). Chart points are small frozen
dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

# A single upstream record as decoded from webhook JSON. Keys and value types
# are not guaranteed; ``trip_ledger.normalize`` decides what survives.
RawRecord: TypeAlias = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionType(StrEnum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Currency(StrEnum):
    """Currencies tracked by the dashboard. ``TRY`` is the base currency."""

    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"


BASE_CURRENCY = Currency.TRY


# ---------------------------------------------------------------------------
# Normalized transaction and aggregates
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Transaction(_WireModel):
    """A validated transaction.

    ``transaction_date`` is ``YYYY-MM-DD`` (or empty when the upstream record
    carried neither a date nor a parseable creation timestamp). ``created_at``
    keeps the upstream string untouched.
    """

    id: str
    amount: float
    type: TransactionType
    category: str
    description: str
    currency: Currency = BASE_CURRENCY
    sub_category: str | None = None
    exchange_rate: float | None = None
    transaction_date: str = ""
    created_at: str = ""
    file_url: str | None = None

    @field_validator("amount")
    @classmethod
    def _amount_positive(cls, v: float) -> float:
        if not v > 0:
            raise ValueError("amount must be positive")
        return v

    @property
    def effective_date(self) -> str:
        """Date used for ordering: the transaction date, else the creation day."""

        if self.transaction_date:
            return self.transaction_date
        return self.created_at[:10]


class CurrencyStats(_WireModel):
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0

    @model_validator(mode="after")
    def _balance_identity(self) -> CurrencyStats:
        if self.balance != self.income - self.expense:
            raise ValueError("balance must equal income - expense")
        return self

    @classmethod
    def from_totals(cls, income: float, expense: float) -> CurrencyStats:
        return cls(income=income, expense=expense, balance=income - expense)


def zero_stats() -> dict[Currency, CurrencyStats]:
    return {c: CurrencyStats() for c in Currency}


class DashboardData(_WireModel):
    """Everything a dashboard render needs, newest transactions first."""

    transactions: tuple[Transaction, ...] = ()
    stats: dict[Currency, CurrencyStats]
    sub_categories: tuple[str, ...] = ()

    @field_validator("stats")
    @classmethod
    def _all_currencies_present(
        cls, v: dict[Currency, CurrencyStats]
    ) -> dict[Currency, CurrencyStats]:
        missing = [c.value for c in Currency if c not in v]
        if missing:
            raise ValueError(f"stats missing currencies: {', '.join(missing)}")
        return v

    @property
    def is_empty(self) -> bool:
        return not self.transactions


# ---------------------------------------------------------------------------
# Chart points
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WeeklyPoint:
    """Income/expense totals for one weekday bucket (``name`` is the short label)."""

    name: str
    income: float
    expense: float


@dataclass(frozen=True, slots=True)
class CategorySlice:
    name: str
    value: float
    color: str


# ---------------------------------------------------------------------------
# Webhook action results
# ---------------------------------------------------------------------------


class WebhookResult(BaseModel):
    """Outcome of a write/query webhook call.

    Failures are reported through ``success=False`` and a user-facing ``error``
    message rather than raised.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    data: Any = None
    error: str | None = None


__all__ = [
    "BASE_CURRENCY",
    "CategorySlice",
    "Currency",
    "CurrencyStats",
    "DashboardData",
    "RawRecord",
    "Transaction",
    "TransactionType",
    "WebhookResult",
    "WeeklyPoint",
    "zero_stats",
]
