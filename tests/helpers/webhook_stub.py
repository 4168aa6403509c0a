"""Test helpers to stub the n8n webhooks with ``httpx.MockTransport``.

``WebhookStub`` answers every request through a ``respond`` callable and
records each request for lightweight assertions on method, URL and body.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx


class WebhookStub:
    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handler))

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]

    @classmethod
    def json(cls, body: Any, status_code: int = 200) -> WebhookStub:
        return cls(lambda _req: httpx.Response(status_code, json=body))

    @classmethod
    def text(cls, body: str, status_code: int = 200) -> WebhookStub:
        return cls(lambda _req: httpx.Response(status_code, text=body))

    @classmethod
    def raising(cls, exc: Exception) -> WebhookStub:
        def _raise(_req: httpx.Request) -> httpx.Response:
            raise exc

        return cls(_raise)


def record(**overrides: Any) -> dict[str, Any]:
    """A valid upstream record with string-encoded numbers, as n8n sends them."""

    base: dict[str, Any] = {
        "id": 1,
        "amount": "100",
        "type": "EXPENSE",
        "category": "Yakıt",
        "description": "Mazot",
        "currency": "TRY",
        "created_at": "2024-01-10T10:00:00Z",
    }
    base.update(overrides)
    return base
