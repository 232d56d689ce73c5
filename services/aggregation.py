"""Monthly cash-flow aggregation over an in-memory list of transactions.

All functions are pure: they take the transactions they need and return new
values. A month is keyed by its 'YYYY-MM' prefix, which sorts chronologically.
"""
from typing import Iterable

from models.summary import MonthlyAggregate
from models.transaction import Transaction


def month_keys(transactions: Iterable[Transaction]) -> list[str]:
    """Sorted distinct 'YYYY-MM' keys that have at least one transaction."""
    return sorted({tx.month for tx in transactions})


def filter_month(transactions: Iterable[Transaction], month: str) -> list[Transaction]:
    return [tx for tx in transactions if tx.month == month]


def sum_expenses(transactions: Iterable[Transaction]) -> float:
    return sum((tx.magnitude for tx in transactions if tx.type == "expense"), 0.0)


def sum_income(transactions: Iterable[Transaction]) -> float:
    return sum((tx.amount for tx in transactions if tx.type == "income"), 0.0)


def month_totals(transactions: Iterable[Transaction], month: str) -> tuple[float, float]:
    """(expenses, income) for one month, no carry-forward."""
    in_month = filter_month(transactions, month)
    return sum_expenses(in_month), sum_income(in_month)


def carry_forward(transactions: list[Transaction], month: str) -> float:
    """Net of every month with data strictly before `month`.

    A month without transactions is not in the key list, so it gets 0 even
    when earlier months have data.
    """
    keys = month_keys(transactions)
    if month not in keys:
        return 0.0
    total = 0.0
    for earlier in keys[:keys.index(month)]:
        expenses, income = month_totals(transactions, earlier)
        total += income - expenses
    return total


def compute_monthly_data(transactions: Iterable[Transaction], month: str) -> MonthlyAggregate:
    transactions = list(transactions)
    in_month = filter_month(transactions, month)
    expenses = sum_expenses(in_month)
    income = sum_income(in_month)
    balance = income - expenses
    carried = carry_forward(transactions, month)
    return MonthlyAggregate(
        month=month,
        transactions=in_month,
        expenses=expenses,
        income=income,
        balance=balance,
        carry_forward=carried,
        total_balance=carried + balance,
    )


def category_breakdown(month_transactions: Iterable[Transaction]) -> list[tuple[str, float]]:
    """Expense magnitude per category, largest first. Ties keep first-seen order."""
    totals: dict[str, float] = {}
    for tx in month_transactions:
        if tx.type != "expense":
            continue
        totals[tx.category] = totals.get(tx.category, 0.0) + tx.magnitude
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)


def monthly_history(transactions: Iterable[Transaction]) -> list[dict]:
    """Return [{month, income, expense, net}] for every month with data, oldest first."""
    transactions = list(transactions)
    rows = []
    for month in month_keys(transactions):
        expenses, income = month_totals(transactions, month)
        rows.append({
            "month": month,
            "income": income,
            "expense": expenses,
            "net": income - expenses,
        })
    return rows
