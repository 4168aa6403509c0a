import json

import pytest
from typer.testing import CliRunner

from tests.helpers.webhook_stub import record
from trip_ledger import cli as cli_mod

runner = CliRunner()


@pytest.fixture
def payload_file(tmp_path):
    payload = {
        "data": [
            {
                "transactions": [
                    record(id=1, amount="300", type="INCOME", category="Tur Satışı",
                           description="Efes turu", transaction_date="2024-05-02"),
                    record(id=2, amount="120", category="Yakıt", description="Mazot",
                           transaction_date="2024-05-03", sub_category="Minibüs"),
                    record(id=3, amount="40", currency="USD", description="Vize",
                           transaction_date="2024-05-01"),
                    record(id=4, amount="0", description="bozuk"),
                ]
            }
        ]
    }
    p = tmp_path / "payload.json"
    p.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return p


def test_dashboard_json(payload_file):
    result = runner.invoke(cli_mod.app, ["dashboard", "--payload-file", str(payload_file), "--json"])
    assert result.exit_code == 0, result.output
    out = json.loads(result.output)
    assert [t["id"] for t in out["transactions"]] == ["2", "1", "3"]
    assert out["stats"]["TRY"] == {"income": 300.0, "expense": 120.0, "balance": 180.0}
    assert out["stats"]["USD"]["expense"] == 40.0
    assert out["subCategories"] == ["Minibüs"]
    assert len(out["weekly"]) == 7
    assert out["expenseDistribution"] == [{"name": "Yakıt", "value": 120.0, "color": "#f97316"}]


def test_dashboard_tables(payload_file):
    result = runner.invoke(cli_mod.app, ["dashboard", "--payload-file", str(payload_file)])
    assert result.exit_code == 0, result.output
    assert "Balances" in result.output
    assert "Mazot" in result.output


def test_transactions_filtered_json(payload_file):
    result = runner.invoke(
        cli_mod.app,
        ["transactions", "--payload-file", str(payload_file), "--type", "EXPENSE", "--json"],
    )
    assert result.exit_code == 0, result.output
    assert [t["id"] for t in json.loads(result.output)] == ["2", "3"]


def test_export_csv(payload_file, tmp_path):
    out = tmp_path / "islemler.csv"
    result = runner.invoke(
        cli_mod.app,
        ["export-csv", "--payload-file", str(payload_file), "--out", str(out), "--search", "mazot"],
    )
    assert result.exit_code == 0, result.output
    lines = out.read_text(encoding="utf-8-sig").splitlines()
    assert lines == ["Tarih;Kategori;Açıklama;Tutar;Tip", "03.05.2024;Yakıt;Mazot;-120 TL;Gider"]


def test_missing_payload_file(tmp_path):
    result = runner.invoke(cli_mod.app, ["dashboard", "--payload-file", str(tmp_path / "nope.json")])
    assert result.exit_code == 1


def test_invalid_timeout_config_exits(monkeypatch):
    monkeypatch.setenv("TRIP_LEDGER_TIMEOUT", "soon")
    result = runner.invoke(cli_mod.app, ["add", "Otel ödemesi 2000 TL"])
    assert result.exit_code == 1


def test_add_reports_webhook_failure(monkeypatch):
    from trip_ledger.models import WebhookResult

    async def _fake_add(text, settings=None, **_kw):
        assert text == "Otel ödemesi 2000 TL"
        return WebhookResult(success=False, error="HTTP 500")

    monkeypatch.setattr("trip_ledger.api.add_transaction", _fake_add)
    result = runner.invoke(cli_mod.app, ["add", "Otel ödemesi 2000 TL"])
    assert result.exit_code == 1


def test_no_subcommand_exits_nonzero():
    assert runner.invoke(cli_mod.app, []).exit_code == 1


def test_verbose_flag_sets_debug_logging(payload_file):
    import logging

    result = runner.invoke(cli_mod.app, ["-v", "dashboard", "--payload-file", str(payload_file)])
    assert result.exit_code == 0, result.output
    assert logging.getLogger("trip_ledger").level == logging.DEBUG
