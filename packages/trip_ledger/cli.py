"""CLI for the ``trip_ledger`` package.

A Typer application with rich output. The root callback loads a local ``.env``
(without overriding variables already set) and configures logging before any
command runs. Read commands accept ``--payload-file`` to work from a saved
dashboard webhook response instead of calling the webhook.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from dataclasses import asdict
from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigError, WebhookSettings, load_settings
from .logging_setup import configure_logging
from .models import Currency, DashboardData, Transaction, TransactionType

app = typer.Typer(
    name="trip-ledger",
    help="Travel agency income/expense dashboard backed by n8n webhooks.",
)
console = Console()
err_console = Console(stderr=True)


class TypeFilter(StrEnum):
    all = "all"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


PayloadFileOption = Annotated[
    Path | None,
    typer.Option(
        "--payload-file",
        help="Read a saved dashboard webhook JSON response instead of calling the webhook.",
        dir_okay=False,
    ),
]
SearchOption = Annotated[
    str, typer.Option(help="Match description or category (case-insensitive).")
]
TypeOption = Annotated[TypeFilter, typer.Option("--type", help="Transaction type filter.")]


# ---- Helpers ------------------------------------------------------------------


def _settings() -> WebhookSettings:
    try:
        return load_settings()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _load_dashboard(payload_file: Path | None) -> DashboardData:
    from .api import build_dashboard_data, fetch_dashboard_data

    if payload_file is None:
        return asyncio.run(fetch_dashboard_data(_settings()))

    try:
        payload = json.loads(payload_file.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        err_console.print(f"[red]Error:[/red] File not found: {payload_file}")
        raise typer.Exit(1) from e
    except (OSError, json.JSONDecodeError) as e:
        err_console.print(f"[red]Error:[/red] Failed to read '{payload_file}': {e}")
        raise typer.Exit(1) from e
    return build_dashboard_data(payload)


def _echo_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _transactions_table(transactions: Sequence[Transaction], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Tarih")
    table.add_column("Kategori")
    table.add_column("Açıklama")
    table.add_column("Tutar", justify="right")
    table.add_column("Döviz")
    for tx in transactions:
        income = tx.type is TransactionType.INCOME
        amount = f"{'+' if income else '-'}{_money(tx.amount)}"
        table.add_row(
            tx.transaction_date or "-",
            escape(tx.category if not tx.sub_category else f"{tx.category} / {tx.sub_category}"),
            escape(tx.description),
            f"[green]{amount}[/green]" if income else f"[red]{amount}[/red]",
            tx.currency.value,
        )
    return table


def _filtered(data: DashboardData, search: str, type_filter: TypeFilter) -> list[Transaction]:
    from .views import filter_transactions

    return filter_transactions(data.transactions, search=search, type_filter=type_filter.value)


# ---- Commands -----------------------------------------------------------------


@app.command("dashboard")
def dashboard_cmd(
    payload_file: PayloadFileOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of tables.")] = False,
    limit: Annotated[int, typer.Option(min=0, help="Recent transactions to show.")] = 10,
) -> None:
    """Show per-currency totals, the weekly chart and top expense categories."""

    from .views import calculate_expense_distribution, calculate_weekly_stats

    data = _load_dashboard(payload_file)
    weekly = calculate_weekly_stats(data.transactions)
    categories = calculate_expense_distribution(data.transactions)

    if as_json:
        _echo_json(
            {
                **data.model_dump(by_alias=True, mode="json"),
                "weekly": [asdict(p) for p in weekly],
                "expenseDistribution": [asdict(s) for s in categories],
            }
        )
        return

    if data.is_empty:
        console.print("[yellow]No transactions.[/yellow]")

    stats_table = Table(title="Balances")
    stats_table.add_column("Currency")
    stats_table.add_column("Income", justify="right", style="green")
    stats_table.add_column("Expense", justify="right", style="red")
    stats_table.add_column("Balance", justify="right")
    for currency in Currency:
        s = data.stats[currency]
        stats_table.add_row(currency.value, _money(s.income), _money(s.expense), _money(s.balance))
    console.print(stats_table)

    weekly_table = Table(title="Last 7 days (TRY)")
    weekly_table.add_column("Day")
    weekly_table.add_column("Income", justify="right", style="green")
    weekly_table.add_column("Expense", justify="right", style="red")
    for point in weekly:
        weekly_table.add_row(point.name, _money(point.income), _money(point.expense))
    console.print(weekly_table)

    if categories:
        cat_table = Table(title="Top expense categories (TRY)")
        cat_table.add_column("Category")
        cat_table.add_column("Total", justify="right")
        for s in categories:
            cat_table.add_row(f"[{s.color}]●[/{s.color}] {escape(s.name)}", _money(s.value))
        console.print(cat_table)

    if limit and data.transactions:
        console.print(_transactions_table(data.transactions[:limit], "Recent transactions"))


@app.command("transactions")
def transactions_cmd(
    payload_file: PayloadFileOption = None,
    search: SearchOption = "",
    type_filter: TypeOption = TypeFilter.all,
    as_json: Annotated[bool, typer.Option("--json", help="Emit JSON instead of a table.")] = False,
) -> None:
    """List transactions, newest first."""

    data = _load_dashboard(payload_file)
    rows = _filtered(data, search, type_filter)
    if as_json:
        _echo_json([tx.model_dump(by_alias=True, mode="json") for tx in rows])
        return
    console.print(_transactions_table(rows, f"Transactions ({len(rows)})"))


@app.command("export-csv")
def export_csv_cmd(
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Destination file (default: islemler-<today>.csv)."),
    ] = None,
    payload_file: PayloadFileOption = None,
    search: SearchOption = "",
    type_filter: TypeOption = TypeFilter.all,
) -> None:
    """Export the (filtered) transaction list as an Excel-friendly CSV."""

    from .export import export_filename, write_csv

    data = _load_dashboard(payload_file)
    rows = _filtered(data, search, type_filter)
    target = out or Path(export_filename())
    try:
        write_csv(target, rows)
    except OSError as e:
        err_console.print(f"[red]Error:[/red] Failed to write '{target}': {e}")
        raise typer.Exit(1) from e
    console.print(f"Wrote {len(rows)} transactions to [cyan]{target}[/cyan]")


@app.command("add")
def add_cmd(
    text: Annotated[
        str, typer.Argument(help="Free-text transaction, e.g. \"Ahmet'e 500 TL mazot verdim\".")
    ],
) -> None:
    """Send a natural-language transaction to the automation webhook."""

    from .api import add_transaction

    if not text.strip():
        err_console.print("[red]Error:[/red] transaction text is empty")
        raise typer.Exit(1)

    result = asyncio.run(add_transaction(text, _settings()))
    if not result.success:
        err_console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(1)
    console.print("[green]İşlem başarıyla eklendi.[/green]")


@app.command("chat")
def chat_cmd() -> None:
    """Interactive analyst chat (type 'exit' or press Ctrl-D to leave)."""

    from .api import ai_query
    from .term_ui import run_chat_loop

    settings = _settings()
    run_chat_loop(
        lambda q: asyncio.run(ai_query(q, settings)),
        emit=lambda line: console.print(line, markup=False),
    )


@app.command("watch")
def watch_cmd(
    interval: Annotated[
        float | None,
        typer.Option(
            min=1, help="Seconds between refreshes (default: TRIP_LEDGER_REFRESH_INTERVAL)."
        ),
    ] = None,
    keep_stale: Annotated[
        bool, typer.Option(help="Keep the last good data when a refresh fails.")
    ] = True,
) -> None:
    """Reload the dashboard periodically and print a one-line summary per refresh."""

    from .api import load_dashboard_data
    from .refresh import DashboardRefresher

    settings = _settings()

    def _summary(data: DashboardData) -> None:
        parts = [f"{c.value} {_money(data.stats[c].balance)}" for c in Currency]
        console.print(f"{len(data.transactions)} transactions | " + " | ".join(parts))

    refresher = DashboardRefresher(
        lambda: load_dashboard_data(settings),
        interval=interval or settings.refresh_interval_seconds,
        on_update=_summary,
        keep_stale=keep_stale,
    )
    try:
        asyncio.run(refresher.run())
    except KeyboardInterrupt:
        refresher.stop()


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log at DEBUG (shows dropped records).")
    ] = False,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (existing environment
    variables win) and sets up logging before dispatching.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(verbose=verbose)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover
    app()
