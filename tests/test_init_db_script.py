from __future__ import annotations

import pytest

from scripts import init_db


@pytest.fixture
def no_mysql(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    applied = []
    monkeypatch.setattr(init_db, "apply_schema", lambda db_config, schema_path: applied.append(schema_path))
    return monkeypatch, applied


def test_reports_cardhub_tables_when_schema_is_complete(no_mysql, capsys):
    monkeypatch, applied = no_mysql
    monkeypatch.setattr(init_db, "list_tables", lambda db_config: list(init_db.CARDHUB_TABLES))

    assert init_db.main() == 0

    out = capsys.readouterr().out
    assert "OK: CardHub schema ready" in out
    assert "  - company_subscriptions" in out
    assert applied[0].name == "schema.sql"


def test_missing_tables_fail_the_script(no_mysql, capsys):
    monkeypatch, _ = no_mysql
    monkeypatch.setattr(init_db, "list_tables", lambda db_config: ["companies", "plans"])

    assert init_db.main() == 1
    assert "missing: company_tokens, company_subscriptions, employees, visits" in capsys.readouterr().out
