"""Thin async client for the n8n webhooks.

Non-streaming JSON GET/POST over ``httpx.AsyncClient`` with a bounded timeout.
Every transport-level problem (connect error, timeout, non-2xx status,
undecodable body) surfaces as :class:`WebhookError`; callers decide whether to
degrade or propagate. Retries are left to the caller.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any

import httpx

from .logging_setup import get_logger

_logger = get_logger("trip_ledger.webhook_client")

_JSON_HEADERS = {"Content-Type": "application/json"}


class WebhookError(RuntimeError):
    """A webhook call failed before a usable response was obtained.

    ``status_code`` is set when the server answered with a non-2xx status.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@asynccontextmanager
async def _client_scope(
    client: httpx.AsyncClient | None, timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    # Borrowed clients stay open; owned clients close on exit.
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned


async def request(
    method: str,
    url: str,
    *,
    payload: Mapping[str, Any] | None = None,
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    """Send one request and return the 2xx response.

    Raises :class:`WebhookError` on transport failure, timeout or non-2xx
    status.
    """

    async with _client_scope(client, timeout) as c:
        try:
            resp = await c.request(
                method,
                url,
                json=payload,
                headers=_JSON_HEADERS,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            raise WebhookError(f"{method} {url} timed out after {timeout:g}s") from e
        except httpx.HTTPError as e:
            raise WebhookError(f"{method} {url} failed: {e}") from e

    if not resp.is_success:
        _logger.warning("%s %s -> HTTP %d", method, url, resp.status_code)
        raise WebhookError(f"HTTP {resp.status_code}", status_code=resp.status_code)
    return resp


def decode_json(resp: httpx.Response) -> Any:
    """Decode a response body as JSON, raising :class:`WebhookError` when it is not."""

    try:
        return resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WebhookError(f"response from {resp.request.url} is not valid JSON") from e


async def get_json(
    url: str, *, timeout: float, client: httpx.AsyncClient | None = None
) -> Any:
    resp = await request("GET", url, timeout=timeout, client=client)
    return decode_json(resp)


async def post_json(
    url: str,
    payload: Mapping[str, Any],
    *,
    timeout: float,
    client: httpx.AsyncClient | None = None,
) -> httpx.Response:
    """POST ``payload`` as JSON and return the raw 2xx response.

    The body is returned undecoded because some webhooks answer 200 with an
    empty or non-JSON body, which callers treat as success.
    """

    return await request("POST", url, payload=payload, timeout=timeout, client=client)


__all__ = ["WebhookError", "decode_json", "get_json", "post_json", "request"]
