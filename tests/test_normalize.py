from datetime import UTC, datetime

import pytest

from tests.helpers.webhook_stub import record
from trip_ledger.models import Currency, TransactionType
from trip_ledger.normalize import (
    DEFAULT_CATEGORY,
    normalize_record,
    normalize_records,
    parse_number,
    parse_timestamp,
    utc_date_of,
)


def test_valid_record_is_normalized():
    tx = normalize_record(
        record(
            id=17,
            amount="1250.50",
            type="INCOME",
            category="Tur Satışı",
            sub_category="Kapadokya",
            currency="USD",
            exchange_rate="32.45",
            file_url="https://files.example/receipt.pdf",
        )
    )
    assert tx is not None
    assert tx.id == "17"
    assert tx.amount == 1250.5
    assert tx.type is TransactionType.INCOME
    assert tx.category == "Tur Satışı"
    assert tx.sub_category == "Kapadokya"
    assert tx.currency is Currency.USD
    assert tx.exchange_rate == 32.45
    assert tx.transaction_date == "2024-01-10"
    assert tx.created_at == "2024-01-10T10:00:00Z"
    assert tx.file_url == "https://files.example/receipt.pdf"


@pytest.mark.parametrize("amount", ["0", "-5", "abc", "", None, "Infinity", True, {"v": 1}])
def test_unusable_amount_is_rejected(amount):
    assert normalize_record(record(amount=amount)) is None


@pytest.mark.parametrize(
    "description", [None, "", "   ", "[object Object]", "Ödeme [object Object] notu", 12]
)
def test_bad_description_is_rejected(description):
    assert normalize_record(record(description=description)) is None


@pytest.mark.parametrize("raw", [None, "text", 5, ["id", 1]])
def test_non_mapping_is_rejected(raw):
    assert normalize_record(raw) is None


@pytest.mark.parametrize(
    "currency, expected",
    [
        ("USD", Currency.USD),
        ("EUR", Currency.EUR),
        ("TRY", Currency.TRY),
        ("GBP", Currency.TRY),
        ("usd", Currency.TRY),
        (None, Currency.TRY),
        (840, Currency.TRY),
    ],
)
def test_currency_closed_world(currency, expected):
    tx = normalize_record(record(currency=currency))
    assert tx is not None and tx.currency is expected


def test_missing_category_gets_default_label():
    raw = record()
    del raw["category"]
    tx = normalize_record(raw)
    assert tx is not None and tx.category == DEFAULT_CATEGORY == "Diğer"


def test_blank_category_gets_default_label():
    tx = normalize_record(record(category="  "))
    assert tx is not None and tx.category == DEFAULT_CATEGORY


@pytest.mark.parametrize("value", [None, "", "n/a"])
def test_unusable_exchange_rate_is_none(value):
    tx = normalize_record(record(exchange_rate=value))
    assert tx is not None and tx.exchange_rate is None


def test_type_other_than_income_counts_as_expense():
    assert normalize_record(record(type="income")).type is TransactionType.INCOME
    assert normalize_record(record(type="REFUND")).type is TransactionType.EXPENSE
    assert normalize_record(record(type=None)).type is TransactionType.EXPENSE


def test_explicit_transaction_date_wins_over_created_at():
    tx = normalize_record(record(transaction_date="2024-02-01T00:00:00.000Z"))
    assert tx is not None and tx.transaction_date == "2024-02-01"


@pytest.mark.parametrize("value", ["15.06.2024", "yesterday", "2024-13-01"])
def test_non_iso_transaction_date_falls_back_to_created_at(value):
    tx = normalize_record(record(transaction_date=value, created_at="2024-03-04T10:00:00Z"))
    assert tx is not None and tx.transaction_date == "2024-03-04"


def test_camel_case_keys_are_accepted():
    raw = {
        "id": 3,
        "amount": 40,
        "type": "EXPENSE",
        "description": "Otel",
        "subCategory": "Antalya",
        "exchangeRate": "35.1",
        "transactionDate": "2024-03-05",
        "createdAt": "2024-03-06T08:00:00Z",
        "fileUrl": "s3://bucket/x.png",
    }
    tx = normalize_record(raw)
    assert tx is not None
    assert (tx.sub_category, tx.exchange_rate, tx.transaction_date, tx.created_at, tx.file_url) == (
        "Antalya",
        35.1,
        "2024-03-05",
        "2024-03-06T08:00:00Z",
        "s3://bucket/x.png",
    )


def test_created_at_date_is_taken_in_utc():
    tx = normalize_record(record(created_at="2024-01-10T01:30:00+03:00"))
    assert tx is not None and tx.transaction_date == "2024-01-09"


def test_no_dates_gives_empty_date():
    raw = record()
    del raw["created_at"]
    tx = normalize_record(raw)
    assert tx is not None and tx.transaction_date == "" and tx.created_at == ""


def test_integral_float_id_is_stringified_without_fraction():
    assert normalize_record(record(id=12.0)).id == "12"


def test_normalize_records_skips_rejections_and_keeps_order():
    raws = [record(id=1), record(id=2, amount="0"), "junk", record(id=3)]
    assert [t.id for t in normalize_records(raws)] == ["1", "3"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("500", 500.0),
        (" 12.5 TL", 12.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("-3", -3.0),
        (7, 7.0),
        (2.25, 2.25),
        ("TL 12", None),
        ("", None),
        (False, None),
        (float("nan"), None),
        ("1e999", None),
        ("٥", None),
        ("12٥", 12.0),
    ],
)
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_utc_date_of_unparseable_is_empty():
    assert utc_date_of("yesterday") == ""
    assert utc_date_of("2024-05-01 23:59:00") == "2024-05-01"


def test_parse_timestamp_reads_naive_values_as_utc():
    assert parse_timestamp("2024-05-01T23:30:00") == datetime(2024, 5, 1, 23, 30, tzinfo=UTC)
    assert parse_timestamp("2024-05-02T01:30:00+03:00") == datetime(
        2024, 5, 1, 22, 30, tzinfo=UTC
    )
    assert parse_timestamp("nope") is None
