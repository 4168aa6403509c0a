"""Public API for the ``trip_ledger`` package.

Pipeline
--------
``build_dashboard_data`` is the pure core: resolve the payload shape,
normalize every record, aggregate. It has no I/O and no hidden state, so
running it twice on the same payload gives equal results.

Webhook calls
-------------
- :func:`load_dashboard_data` fetches and builds, raising
  :class:`~trip_ledger.webhook_client.WebhookError` on transport failure.
- :func:`fetch_dashboard_data` wraps it and never raises: failures become the
  empty dashboard.
- :func:`add_transaction` and :func:`ai_query` report failures through
  :class:`~trip_ledger.models.WebhookResult`.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import httpx

from .aggregate import aggregate, empty_dashboard
from .config import WebhookSettings
from .logging_setup import get_logger
from .models import DashboardData, WebhookResult
from .normalize import normalize_records
from .shapes import resolve_transactions
from .webhook_client import WebhookError, decode_json, get_json, post_json

_logger = get_logger("trip_ledger.api")

TRANSACTION_FAILED = "İşlem başarısız"
TRANSACTION_CONNECTION_ERROR = "Bağlantı hatası oluştu. Lütfen tekrar deneyin."
AI_CONNECTION_ERROR = "AI bağlantısı kurulamadı. Lütfen tekrar deneyin."


# ---------------------------------------------------------------------------
# Pure pipeline
# ---------------------------------------------------------------------------


def build_dashboard_data(payload: Any) -> DashboardData:
    """Turn a raw dashboard webhook payload into :class:`DashboardData`."""

    records = resolve_transactions(payload)
    transactions = normalize_records(records)
    return aggregate(transactions)


# ---------------------------------------------------------------------------
# Dashboard load
# ---------------------------------------------------------------------------


async def load_dashboard_data(
    settings: WebhookSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> DashboardData:
    """Fetch the dashboard payload and build :class:`DashboardData`.

    Raises :class:`WebhookError` when the webhook cannot be reached, answers
    with a non-2xx status or returns a body that is not JSON.
    """

    cfg = settings or WebhookSettings()
    payload = await get_json(cfg.dashboard_url, timeout=cfg.timeout_seconds, client=client)
    data = build_dashboard_data(payload)
    _logger.info("loaded %d transactions from dashboard webhook", len(data.transactions))
    return data


async def fetch_dashboard_data(
    settings: WebhookSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> DashboardData:
    """Like :func:`load_dashboard_data`, but a failed fetch yields the empty dashboard."""

    try:
        return await load_dashboard_data(settings, client=client)
    except WebhookError as e:
        _logger.warning("dashboard fetch failed: %s", e)
        return empty_dashboard()


# ---------------------------------------------------------------------------
# Natural-language transaction entry
# ---------------------------------------------------------------------------


def _failure_from_body(body: Any) -> WebhookResult | None:
    if isinstance(body, Mapping) and (body.get("success") is False or body.get("error")):
        error = body.get("error")
        return WebhookResult(success=False, error=str(error) if error else TRANSACTION_FAILED)
    return None


async def add_transaction(
    text: str,
    settings: WebhookSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> WebhookResult:
    """Send a free-text transaction (e.g. "Ahmet'e 500 TL mazot parası verdim").

    The upstream automation parses and stores it. Any 2xx answer counts as
    success unless its JSON body explicitly reports a failure.
    """

    if not text.strip():
        raise ValueError("transaction text must be non-empty")

    cfg = settings or WebhookSettings()
    timestamp = (now or datetime.now(UTC)).isoformat()
    try:
        resp = await post_json(
            cfg.transaction_url,
            {"text": text, "timestamp": timestamp},
            timeout=cfg.timeout_seconds,
            client=client,
        )
    except WebhookError as e:
        if e.status_code is not None:
            return WebhookResult(success=False, error=str(e))
        _logger.error("transaction webhook unreachable: %s", e)
        return WebhookResult(success=False, error=TRANSACTION_CONNECTION_ERROR)

    try:
        body = decode_json(resp)
    except WebhookError:
        # Non-JSON 2xx body: the workflow accepted the request.
        return WebhookResult(success=True)

    failure = _failure_from_body(body)
    if failure is not None:
        _logger.warning("transaction webhook reported failure: %s", failure.error)
        return failure
    return WebhookResult(success=True)


# ---------------------------------------------------------------------------
# Analyst chat
# ---------------------------------------------------------------------------


async def ai_query(
    message: str,
    settings: WebhookSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> WebhookResult:
    """Ask the analyst chatbot a question.

    Responses shaped ``{"text": ...}`` or ``{"output": ...}`` are reduced to
    ``data={"output": ...}``; any other JSON is passed through as ``data``.
    """

    if not message.strip():
        raise ValueError("message must be non-empty")

    cfg = settings or WebhookSettings()
    try:
        resp = await post_json(
            cfg.chatbot_url,
            {"chatInput": message},
            timeout=cfg.timeout_seconds,
            client=client,
        )
        body = decode_json(resp)
    except WebhookError as e:
        if e.status_code is not None:
            return WebhookResult(success=False, error=str(e))
        _logger.error("chatbot webhook failed: %s", e)
        return WebhookResult(success=False, error=AI_CONNECTION_ERROR)

    if isinstance(body, Mapping):
        if body.get("text") is not None:
            success = body.get("success")
            return WebhookResult(
                success=True if success is None else bool(success),
                data={"output": body["text"]},
            )
        if body.get("output") is not None:
            return WebhookResult(success=True, data={"output": body["output"]})
    return WebhookResult(success=True, data=body)


__all__ = [
    "add_transaction",
    "ai_query",
    "build_dashboard_data",
    "fetch_dashboard_data",
    "load_dashboard_data",
]
