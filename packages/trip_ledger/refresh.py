"""Periodic dashboard refresh with at most one load in flight.

A refresh requested while another is running does not start a second request;
it awaits the running one and receives the same result. When the loader fails,
the refresher keeps the last good data (``keep_stale=True``) or falls back to
the empty dashboard.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeAlias

from .aggregate import empty_dashboard
from .logging_setup import get_logger
from .models import DashboardData
from .webhook_client import WebhookError

_logger = get_logger("trip_ledger.refresh")

Loader: TypeAlias = Callable[[], Awaitable[DashboardData]]
UpdateCallback: TypeAlias = Callable[[DashboardData], None]


class DashboardRefresher:
    def __init__(
        self,
        loader: Loader,
        *,
        interval: float,
        on_update: UpdateCallback | None = None,
        keep_stale: bool = True,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._loader = loader
        self._interval = interval
        self._on_update = on_update
        self._keep_stale = keep_stale
        self._current: DashboardData = empty_dashboard()
        self._inflight: asyncio.Task[DashboardData] | None = None
        self._stopped: asyncio.Event | None = None

    @property
    def current(self) -> DashboardData:
        return self._current

    async def _load_once(self) -> DashboardData:
        try:
            data = await self._loader()
        except WebhookError as e:
            _logger.warning("refresh failed: %s", e)
            if self._keep_stale:
                return self._current
            data = empty_dashboard()
        self._current = data
        if self._on_update is not None:
            self._on_update(data)
        return data

    async def refresh(self) -> DashboardData:
        """Load now, or join the load already in flight."""

        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._load_once())
        return await asyncio.shield(self._inflight)

    async def run(self) -> None:
        """Refresh immediately, then every ``interval`` seconds until :meth:`stop`."""

        self._stopped = asyncio.Event()
        while not self._stopped.is_set():
            await self.refresh()
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
            except TimeoutError:
                continue

    def stop(self) -> None:
        if self._stopped is not None:
            self._stopped.set()


__all__ = ["DashboardRefresher"]
