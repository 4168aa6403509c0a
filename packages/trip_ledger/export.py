"""CSV export of the transaction list, formatted for Turkish-locale Excel.

Layout: UTF-8 BOM (so Excel detects the encoding), ``;`` as delimiter,
``dd.mm.yyyy`` dates and ``1.234,56`` style amounts with a currency suffix.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date
from os import PathLike
from pathlib import Path

from .models import Currency, Transaction, TransactionType

BOM = "\ufeff"
HEADERS: tuple[str, ...] = ("Tarih", "Kategori", "Açıklama", "Tutar", "Tip")

_CURRENCY_SUFFIX = {Currency.TRY: "TL", Currency.USD: "USD", Currency.EUR: "EUR"}
_TYPE_LABEL = {TransactionType.INCOME: "Gelir", TransactionType.EXPENSE: "Gider"}


def format_tr_number(value: float, *, max_fraction_digits: int = 3) -> str:
    """Format like ``toLocaleString('tr-TR')``: ``.`` groups, ``,`` decimals.

    >>> format_tr_number(1234.5)
    '1.234,5'
    """

    s = f"{value:,.{max_fraction_digits}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s.replace(",", "\0").replace(".", ",").replace("\0", ".")


def format_tr_date(iso_date: str) -> str:
    if not iso_date:
        return "-"
    try:
        d = date.fromisoformat(iso_date)
    except ValueError:
        return "-"
    return d.strftime("%d.%m.%Y")


def _row(tx: Transaction) -> list[str]:
    sign = "+" if tx.type is TransactionType.INCOME else "-"
    return [
        format_tr_date(tx.transaction_date),
        tx.category,
        tx.description,
        f"{sign}{format_tr_number(tx.amount)} {_CURRENCY_SUFFIX[tx.currency]}",
        _TYPE_LABEL[tx.type],
    ]


def transactions_to_csv(transactions: Iterable[Transaction]) -> str:
    """Render ``transactions`` (in the given order) as CSV text including the BOM."""

    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=";", lineterminator="\n")
    writer.writerow(HEADERS)
    for tx in transactions:
        writer.writerow(_row(tx))
    return BOM + buf.getvalue()


def export_filename(today: date | None = None) -> str:
    return f"islemler-{(today or date.today()).isoformat()}.csv"


def write_csv(path: str | PathLike[str], transactions: Iterable[Transaction]) -> Path:
    p = Path(path)
    # newline="" keeps the writer's "\n" terminators as-is on every platform.
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(transactions_to_csv(transactions))
    return p


__all__ = [
    "BOM",
    "HEADERS",
    "export_filename",
    "format_tr_date",
    "format_tr_number",
    "transactions_to_csv",
    "write_csv",
]
