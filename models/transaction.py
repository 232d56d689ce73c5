from dataclasses import dataclass

from utils.date_helpers import month_key


@dataclass
class Transaction:
    id: int
    date: str               # 'YYYY-MM-DD'
    description: str
    amount: float           # negative for expense, positive for income
    type: str               # 'expense' | 'income'
    category: str
    payment: str = ""

    @property
    def month(self) -> str:
        return month_key(self.date)

    @property
    def magnitude(self) -> float:
        return abs(self.amount)
