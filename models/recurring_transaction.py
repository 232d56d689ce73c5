from dataclasses import dataclass


@dataclass
class RecurringTransaction:
    id: int
    description: str
    amount: float           # same sign convention as Transaction
    type: str               # 'expense' | 'income'
    category: str
    payment: str
    frequency: str          # 'daily' | 'weekly' | 'monthly'
    next_due_date: str      # 'YYYY-MM-DD'

    def is_due(self, today_str: str) -> bool:
        # Zero-padded ISO dates compare correctly as strings.
        return self.next_due_date <= today_str
