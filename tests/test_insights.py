import pytest

from services.insights import (
    category_percent_change,
    compute_insights,
    total_percent_change,
)
from utils.constants import (
    CATEGORY_PERCENT_NEW,
    CATEGORY_PERCENT_NO_BASELINE,
    TOTAL_PERCENT_NO_BASELINE,
)
from conftest import make_tx


def _two_months():
    return [
        make_tx(1, "2025-01-05", -60.0, category="Groceries"),
        make_tx(2, "2025-01-09", -40.0, category="Public Transport"),
        make_tx(3, "2025-01-31", 1000.0, category="Salary"),
        make_tx(4, "2025-02-03", -150.0, category="Groceries"),
        make_tx(5, "2025-02-10", -50.0, category="Pet Care"),
        make_tx(6, "2025-02-28", 1100.0, category="Salary"),
    ]


def test_expense_change_against_previous_month():
    insight = compute_insights(_two_months(), "2025-02")

    assert insight.previous_month == "2025-01"
    assert insight.current_total_expenses == pytest.approx(200)
    assert insight.previous_total_expenses == pytest.approx(100)
    assert insight.expense_change == pytest.approx(100)
    assert insight.expense_percent_change == pytest.approx(100)
    assert insight.income_change == pytest.approx(100)
    assert insight.income_percent_change == pytest.approx(10)


def test_category_changes_sorted_by_relative_move():
    insight = compute_insights(_two_months(), "2025-02")
    changes = {c.category: c for c in insight.category_changes}

    assert [c.category for c in insight.category_changes] == [
        "Groceries", "Pet Care", "Public Transport",
    ]
    assert changes["Groceries"].percent_change == pytest.approx(150)
    assert changes["Pet Care"].percent_change == CATEGORY_PERCENT_NEW
    assert changes["Public Transport"].percent_change == pytest.approx(-100)
    assert changes["Public Transport"].current == 0
    assert "Salary" not in changes


def test_earliest_month_has_insufficient_data():
    assert compute_insights(_two_months(), "2025-01") is None


def test_month_absent_from_data_has_insufficient_data():
    assert compute_insights(_two_months(), "2025-03") is None
    assert compute_insights([], "2025-03") is None


def test_previous_month_is_by_data_presence_not_calendar():
    txs = [
        make_tx(1, "2024-11-02", -10.0),
        make_tx(2, "2025-02-02", -30.0),
    ]
    insight = compute_insights(txs, "2025-02")
    assert insight.previous_month == "2024-11"


def test_total_percent_guard_without_baseline():
    txs = [
        make_tx(1, "2025-01-05", 500.0, category="Salary"),
        make_tx(2, "2025-02-05", -80.0, category="Groceries"),
    ]
    insight = compute_insights(txs, "2025-02")

    assert insight.previous_total_expenses == 0
    assert insight.expense_change == pytest.approx(80)
    assert insight.expense_percent_change == TOTAL_PERCENT_NO_BASELINE
    assert insight.income_percent_change == pytest.approx(-100)


def test_changes_within_noise_floor_are_dropped():
    txs = [
        make_tx(1, "2025-01-05", -10.00, category="Groceries"),
        make_tx(2, "2025-02-05", -10.01, category="Groceries"),
    ]
    insight = compute_insights(txs, "2025-02")
    assert insight.category_changes == []


def test_percent_guards():
    assert total_percent_change(50, 0) == 0.0
    assert category_percent_change(50, 0) == 100.0
    assert category_percent_change(0, 0) == CATEGORY_PERCENT_NO_BASELINE
    assert total_percent_change(150, 100) == pytest.approx(50)
