from dataclasses import dataclass, field

from models.transaction import Transaction


@dataclass
class MonthlyAggregate:
    month: str                  # 'YYYY-MM'
    transactions: list[Transaction]
    expenses: float
    income: float
    balance: float
    carry_forward: float
    total_balance: float


@dataclass
class CategoryChange:
    category: str
    current: float
    previous: float
    change: float
    percent_change: float


@dataclass
class MonthlyInsight:
    month: str
    previous_month: str
    current_total_expenses: float
    previous_total_expenses: float
    expense_change: float
    expense_percent_change: float
    current_total_income: float
    previous_total_income: float
    income_change: float
    income_percent_change: float
    category_changes: list[CategoryChange] = field(default_factory=list)


@dataclass
class Suggestion:
    description: str
    amount: float
    type: str
    category: str
    payment: str
    count: int
