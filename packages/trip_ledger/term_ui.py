"""Terminal chat loop for the analyst chatbot (prompt_toolkit-based).

Kept apart from the CLI so it can be driven with a pipe input in tests.
"""

from __future__ import annotations

from collections.abc import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .models import WebhookResult

EXIT_WORDS = frozenset({"exit", "quit", ":q"})


def _render(result: WebhookResult) -> str:
    if not result.success:
        return f"Hata: {result.error or 'bilinmeyen hata'}"
    data = result.data
    if isinstance(data, dict) and "output" in data:
        return str(data["output"])
    return "" if data is None else str(data)


def run_chat_loop(
    ask: Callable[[str], WebhookResult],
    *,
    session: PromptSession | None = None,
    emit: Callable[[str], None] = print,
    message: str = "Soru> ",
) -> int:
    """Prompt for questions until EOF/Ctrl-C or an exit word; return the number asked.

    Blank lines are ignored. ``ask`` performs the actual query (the CLI wraps
    :func:`trip_ledger.api.ai_query`).
    """

    sess = session or PromptSession(history=InMemoryHistory())
    asked = 0
    while True:
        try:
            line = sess.prompt(message)
        except (EOFError, KeyboardInterrupt):
            break
        text = line.strip()
        if not text:
            continue
        if text.lower() in EXIT_WORDS:
            break
        emit(_render(ask(text)))
        asked += 1
    return asked


__all__ = ["run_chat_loop"]
