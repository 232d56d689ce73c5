from datetime import date

import pytest

from utils.app_config import get_db_path, load_config, save_config, set_db_path
from utils.currency import format_currency, format_percent, format_signed
from utils.date_helpers import (
    add_months,
    add_months_rolling,
    friendly_month,
    month_key,
    parse_date,
    parse_month,
)


def test_parse_date_accepts_only_iso():
    assert parse_date("2025-02-28") == date(2025, 2, 28)
    assert parse_date("2025-02-30") is None
    assert parse_date("28/02/2025") is None
    assert parse_date("") is None
    assert parse_date(None) is None


def test_month_helpers():
    assert month_key("2025-02-10") == "2025-02"
    assert parse_month("2025-13") is None
    assert friendly_month("2026-02") == "February 2026"
    assert friendly_month("garbage") == "garbage"


def test_add_months_policies():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months_rolling(date(2025, 1, 31), 1) == date(2025, 3, 3)
    assert add_months_rolling(date(2025, 11, 30), 3) == date(2026, 3, 2)
    assert add_months_rolling(date(2025, 6, 15), 1) == date(2025, 7, 15)


def test_currency_formatting():
    assert format_currency(1234.5) == "€1,234.50"
    assert format_signed(-4.99, "$") == "-$4.99"
    assert format_signed(10) == "+€10.00"
    assert format_percent(12.345) == "+12.3%"


def test_config_missing_or_corrupt_returns_empty(tmp_path):
    path = tmp_path / "config.json"
    assert load_config(path) == {}
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == {}


def test_config_db_path_round_trip(tmp_path):
    path = tmp_path / "nested" / "config.json"
    set_db_path("/data/ledger.db", path)
    assert get_db_path(path) == "/data/ledger.db"
    assert not path.with_suffix(".tmp").exists()

    save_config({"db_path": "/other.db", "extra": 1}, path)
    set_db_path(None, path)
    assert load_config(path) == {"extra": 1}


@pytest.mark.parametrize("text", ["2025-1-5", "2025-01-5", "2025-1-05", " 2025-01-05"])
def test_parse_date_requires_zero_padding(text):
    assert parse_date(text) is None


def test_parse_month_requires_zero_padding():
    assert parse_month("2025-2") is None
    assert parse_month("2025-02") == date(2025, 2, 1)
