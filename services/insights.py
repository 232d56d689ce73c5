"""Month-over-month comparison of totals and per-category spending."""
from typing import Iterable, Optional

from models.summary import CategoryChange, MonthlyInsight
from models.transaction import Transaction
from services.aggregation import filter_month, month_keys, sum_expenses, sum_income
from utils.constants import (
    CATEGORY_PERCENT_NEW,
    CATEGORY_PERCENT_NO_BASELINE,
    CHANGE_NOISE_FLOOR,
    TOTAL_PERCENT_NO_BASELINE,
)


def total_percent_change(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    return TOTAL_PERCENT_NO_BASELINE


def category_percent_change(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return CATEGORY_PERCENT_NEW
    return CATEGORY_PERCENT_NO_BASELINE


def _expense_by_category(transactions: list[Transaction]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for tx in transactions:
        if tx.type == "expense":
            totals[tx.category] = totals.get(tx.category, 0.0) + tx.magnitude
    return totals


def category_changes(
    current_txs: list[Transaction], previous_txs: list[Transaction]
) -> list[CategoryChange]:
    """Per-category expense deltas, biggest relative move first.

    Changes within CHANGE_NOISE_FLOOR are dropped. Ties keep first-seen
    order, current month's categories before previous month's.
    """
    current = _expense_by_category(current_txs)
    previous = _expense_by_category(previous_txs)
    names = list(current) + [name for name in previous if name not in current]

    changes = []
    for name in names:
        cur = current.get(name, 0.0)
        prev = previous.get(name, 0.0)
        change = cur - prev
        if abs(change) <= CHANGE_NOISE_FLOOR:
            continue
        changes.append(CategoryChange(
            category=name,
            current=cur,
            previous=prev,
            change=change,
            percent_change=category_percent_change(cur, prev),
        ))
    changes.sort(key=lambda c: abs(c.percent_change), reverse=True)
    return changes


def compute_insights(
    transactions: Iterable[Transaction], month: str
) -> Optional[MonthlyInsight]:
    """Compare `month` with the closest earlier month that has data.

    Returns None when `month` has no transactions or is the earliest month
    with data. Calendar gaps are skipped: March compares with January when
    February is empty.
    """
    transactions = list(transactions)
    keys = month_keys(transactions)
    if month not in keys:
        return None
    idx = keys.index(month)
    if idx < 1:
        return None
    previous_month = keys[idx - 1]

    current_txs = filter_month(transactions, month)
    previous_txs = filter_month(transactions, previous_month)

    cur_exp, prev_exp = sum_expenses(current_txs), sum_expenses(previous_txs)
    cur_inc, prev_inc = sum_income(current_txs), sum_income(previous_txs)

    return MonthlyInsight(
        month=month,
        previous_month=previous_month,
        current_total_expenses=cur_exp,
        previous_total_expenses=prev_exp,
        expense_change=cur_exp - prev_exp,
        expense_percent_change=total_percent_change(cur_exp, prev_exp),
        current_total_income=cur_inc,
        previous_total_income=prev_inc,
        income_change=cur_inc - prev_inc,
        income_percent_change=total_percent_change(cur_inc, prev_inc),
        category_changes=category_changes(current_txs, previous_txs),
    )
