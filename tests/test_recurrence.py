from datetime import date

import pytest

from services.recurrence import advance, next_id, project_due
from utils.constants import CATCHUP_BACKFILL, OVERFLOW_CLAMP
from conftest import make_rule, make_tx


def test_advance_daily_and_weekly():
    assert advance(date(2025, 12, 31), "daily") == date(2026, 1, 1)
    assert advance(date(2025, 2, 25), "weekly") == date(2025, 3, 4)


def test_advance_monthly_keeps_day_of_month():
    assert advance(date(2025, 1, 15), "monthly") == date(2025, 2, 15)
    assert advance(date(2025, 12, 10), "monthly") == date(2026, 1, 10)


def test_monthly_overflow_rolls_into_next_month():
    assert advance(date(2025, 1, 31), "monthly") == date(2025, 3, 3)
    assert advance(date(2024, 1, 31), "monthly") == date(2024, 3, 2)
    assert advance(date(2025, 3, 31), "monthly") == date(2025, 5, 1)


def test_monthly_overflow_clamp_policy():
    assert advance(date(2025, 1, 31), "monthly", OVERFLOW_CLAMP) == date(2025, 2, 28)
    assert advance(date(2024, 1, 31), "monthly", OVERFLOW_CLAMP) == date(2024, 2, 29)


def test_advance_rejects_unknown_frequency():
    with pytest.raises(ValueError):
        advance(date(2025, 1, 1), "yearly")


def test_overdue_monthly_fires_once_and_advances_from_today():
    rule = make_rule(1, "2025-01-31", "monthly")
    result = project_due([rule], [], date(2025, 2, 15))

    assert result.fired == 1
    assert len(result.new_transactions) == 1
    assert result.recurring[0].next_due_date == "2025-03-15"


def test_fire_on_the_31st_pins_roll_forward():
    rule = make_rule(1, "2025-01-31", "monthly")
    result = project_due([rule], [], date(2025, 1, 31))

    assert result.recurring[0].next_due_date == "2025-03-03"


def test_materialized_transaction_copies_template():
    rule = make_rule(7, "2025-03-01", "weekly", amount=-12.5, payment="Card")
    existing = [make_tx(4, "2025-02-01", -1.0), make_tx(9, "2025-02-02", -2.0)]
    result = project_due([rule], existing, date(2025, 3, 1))

    tx = result.new_transactions[0]
    assert tx.id == 10
    assert tx.date == "2025-03-01"
    assert tx.description == "Netflix (Auto)"
    assert tx.amount == -12.5
    assert tx.type == "expense"
    assert tx.category == rule.category
    assert tx.payment == "Card"
    assert len(result.transactions) == 3


def test_simultaneous_firings_get_distinct_ids():
    rules = [make_rule(1, "2025-03-01"), make_rule(2, "2025-02-20", "daily")]
    result = project_due(rules, [make_tx(5, "2025-01-01", -1.0)], date(2025, 3, 1))

    assert [t.id for t in result.new_transactions] == [6, 7]


def test_single_catchup_leaves_stale_daily_rule_overdue():
    rule = make_rule(1, "2025-01-01", "daily")
    result = project_due([rule], [], date(2025, 3, 1))

    assert result.fired == 1
    assert len(result.new_transactions) == 1
    assert result.recurring[0].next_due_date == "2025-03-02"


def test_never_fires_for_future_due_date():
    rule = make_rule(1, "2025-03-02", "daily")
    result = project_due([rule], [], date(2025, 3, 1))

    assert result.fired == 0
    assert result.new_transactions == []
    assert result.recurring == [rule]


def test_projection_is_idempotent_within_one_day():
    rules = [make_rule(1, "2025-02-01", "daily"), make_rule(2, "2025-03-01", "weekly")]
    today = date(2025, 3, 1)
    first = project_due(rules, [], today)
    second = project_due(first.recurring, first.transactions, today)

    assert first.fired == 2
    assert second.fired == 0
    assert second.transactions == first.transactions


def test_inputs_are_not_mutated():
    rule = make_rule(1, "2025-02-01")
    txs = [make_tx(1, "2025-01-01", -1.0)]
    project_due([rule], txs, date(2025, 3, 1))

    assert rule.next_due_date == "2025-02-01"
    assert len(txs) == 1


def test_no_due_definitions_is_a_no_op():
    txs = [make_tx(1, "2025-01-01", -1.0)]
    result = project_due([], txs, date(2025, 3, 1))

    assert result.fired == 0
    assert result.transactions == txs
    assert result.transactions is not txs


def test_changed_recurring_lists_only_fired_definitions():
    rules = [make_rule(1, "2025-03-01"), make_rule(2, "2025-04-01")]
    result = project_due(rules, [], date(2025, 3, 1))

    assert [r.id for r in result.changed_recurring] == [1]


def test_backfill_emits_one_transaction_per_missed_period():
    rule = make_rule(1, "2025-02-20", "weekly")
    result = project_due([rule], [], date(2025, 3, 10), catchup=CATCHUP_BACKFILL)

    assert [t.date for t in result.new_transactions] == ["2025-02-20", "2025-02-27", "2025-03-06"]
    assert [t.id for t in result.new_transactions] == [1, 2, 3]
    assert result.recurring[0].next_due_date == "2025-03-13"


def test_backfill_skips_occurrences_older_than_catchup_window():
    rule = make_rule(1, "2024-01-01", "monthly")
    result = project_due([rule], [], date(2025, 3, 1), catchup=CATCHUP_BACKFILL)

    dates = [t.date for t in result.new_transactions]
    assert dates == ["2024-12-01", "2025-01-01", "2025-02-01", "2025-03-01"]
    assert result.recurring[0].next_due_date == "2025-04-01"


def test_backfill_is_idempotent_within_one_day():
    rule = make_rule(1, "2025-02-27", "daily")
    today = date(2025, 3, 1)
    first = project_due([rule], [], today, catchup=CATCHUP_BACKFILL)
    second = project_due(first.recurring, first.transactions, today, catchup=CATCHUP_BACKFILL)

    assert len(first.new_transactions) == 3
    assert second.fired == 0


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        project_due([], [], date(2025, 1, 1), catchup="all")


def test_next_id():
    assert next_id([]) == 1
    assert next_id([make_tx(3, "2025-01-01", -1.0), make_tx(8, "2025-01-01", -1.0)]) == 9
