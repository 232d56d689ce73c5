"""Project due recurring definitions into concrete transactions.

`project_due` is pure: it never touches the store and never mutates its
inputs. Persisting the result is RecurringService's job.
"""
from dataclasses import replace
from datetime import date, timedelta
from typing import Iterable

from models.ledger import Firing, ProjectionResult
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from utils.constants import (
    AUTO_SUFFIX,
    CATCHUP_BACKFILL,
    CATCHUP_POLICIES,
    CATCHUP_SINGLE,
    DAY_INTERVALS,
    OVERFLOW_CLAMP,
    OVERFLOW_POLICIES,
    OVERFLOW_ROLL,
    RECURRING_CATCHUP_DAYS,
)
from utils.date_helpers import (
    add_days,
    add_months,
    add_months_rolling,
    format_date,
    parse_date,
)


def advance(d: date, frequency: str, overflow: str = OVERFLOW_ROLL) -> date:
    """Next occurrence after d for the given frequency."""
    if frequency in DAY_INTERVALS:
        return add_days(d, DAY_INTERVALS[frequency])
    if frequency == "monthly":
        if overflow == OVERFLOW_CLAMP:
            return add_months(d, 1)
        return add_months_rolling(d, 1)
    raise ValueError(f"Invalid frequency: {frequency}")


def next_id(transactions: Iterable[Transaction]) -> int:
    """max(existing ids) + 1, or 1 for an empty ledger. Provisional only."""
    return max((tx.id for tx in transactions), default=0) + 1


def materialize(rule: RecurringTransaction, on: str, tx_id: int) -> Transaction:
    return Transaction(
        id=tx_id,
        date=on,
        description=rule.description + AUTO_SUFFIX,
        amount=rule.amount,
        type=rule.type,
        category=rule.category,
        payment=rule.payment,
    )


def _single_occurrence(rule, today, overflow, working):
    tx = materialize(rule, format_date(today), next_id(working))
    return [tx], advance(today, rule.frequency, overflow)


def _backfill(rule, today, overflow, working):
    cutoff = today - timedelta(days=RECURRING_CATCHUP_DAYS)
    generated = []
    current = parse_date(rule.next_due_date)
    while current <= today:
        if current >= cutoff:
            tx = materialize(rule, format_date(current), next_id(working + generated))
            generated.append(tx)
        current = advance(current, rule.frequency, overflow)
    return generated, current


def project_due(
    recurring: Iterable[RecurringTransaction],
    transactions: Iterable[Transaction],
    today: date,
    catchup: str = CATCHUP_SINGLE,
    overflow: str = OVERFLOW_ROLL,
) -> ProjectionResult:
    """Fire every definition whose next_due_date is on or before today.

    With the single-occurrence catch-up policy each due definition yields
    exactly one transaction dated today and its next_due_date moves to
    advance(today), even when several periods were missed; it stays overdue
    and fires again on the next check. The backfill policy emits one
    transaction per missed occurrence (within RECURRING_CATCHUP_DAYS) instead.

    Generated ids are max+1 over the working set so that simultaneous
    firings never collide; the store replaces them when persisting.
    """
    if catchup not in CATCHUP_POLICIES:
        raise ValueError(f"Invalid catch-up policy: {catchup}")
    if overflow not in OVERFLOW_POLICIES:
        raise ValueError(f"Invalid month overflow policy: {overflow}")

    today_str = format_date(today)
    working = list(transactions)
    updated: list[RecurringTransaction] = []
    firings: list[Firing] = []

    for rule in recurring:
        if not rule.is_due(today_str):
            updated.append(rule)
            continue

        if catchup == CATCHUP_BACKFILL:
            generated, next_due = _backfill(rule, today, overflow, working)
        else:
            generated, next_due = _single_occurrence(rule, today, overflow, working)

        working.extend(generated)
        advanced = replace(rule, next_due_date=format_date(next_due))
        updated.append(advanced)
        firings.append(Firing(before=rule, after=advanced, transactions=generated))

    return ProjectionResult(transactions=working, recurring=updated, firings=firings)
