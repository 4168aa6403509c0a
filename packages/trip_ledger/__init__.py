"""Public interface for the ``trip_ledger`` package.

Re-exports the pipeline, webhook API functions and models as the stable import
surface.
"""

from .aggregate import aggregate, empty_dashboard
from .api import (
    add_transaction,
    ai_query,
    build_dashboard_data,
    fetch_dashboard_data,
    load_dashboard_data,
)
from .config import ConfigError, WebhookSettings, load_settings
from .models import (
    CategorySlice,
    Currency,
    CurrencyStats,
    DashboardData,
    Transaction,
    TransactionType,
    WebhookResult,
    WeeklyPoint,
)
from .normalize import DEFAULT_CATEGORY, normalize_record, normalize_records
from .refresh import DashboardRefresher
from .shapes import resolve_transactions
from .views import calculate_expense_distribution, calculate_weekly_stats, filter_transactions
from .webhook_client import WebhookError

__all__ = [
    # Pipeline
    "aggregate",
    "build_dashboard_data",
    "calculate_expense_distribution",
    "calculate_weekly_stats",
    "empty_dashboard",
    "filter_transactions",
    "normalize_record",
    "normalize_records",
    "resolve_transactions",
    "DEFAULT_CATEGORY",
    # Webhooks
    "add_transaction",
    "ai_query",
    "fetch_dashboard_data",
    "load_dashboard_data",
    "DashboardRefresher",
    "WebhookError",
    # Config
    "ConfigError",
    "WebhookSettings",
    "load_settings",
    # Models
    "CategorySlice",
    "Currency",
    "CurrencyStats",
    "DashboardData",
    "Transaction",
    "TransactionType",
    "WebhookResult",
    "WeeklyPoint",
]
