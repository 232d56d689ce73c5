from dataclasses import dataclass, field

from models.transaction import Transaction
from models.recurring_transaction import RecurringTransaction


@dataclass(frozen=True)
class LedgerSnapshot:
    """Everything the engines read, loaded from the store in one go.

    Callers refresh it after every write; the engines never hold on to one.
    """
    transactions: tuple[Transaction, ...] = ()
    recurring: tuple[RecurringTransaction, ...] = ()

    @classmethod
    def of(cls, transactions, recurring=()) -> "LedgerSnapshot":
        return cls(tuple(transactions), tuple(recurring))


@dataclass
class Firing:
    """One due definition and the transactions it produced in a projection pass."""
    before: RecurringTransaction
    after: RecurringTransaction
    transactions: list[Transaction] = field(default_factory=list)


@dataclass
class ProjectionResult:
    transactions: list[Transaction]
    recurring: list[RecurringTransaction]
    firings: list[Firing] = field(default_factory=list)

    @property
    def fired(self) -> int:
        return len(self.firings)

    @property
    def new_transactions(self) -> list[Transaction]:
        return [tx for f in self.firings for tx in f.transactions]

    @property
    def changed_recurring(self) -> list[RecurringTransaction]:
        return [f.after for f in self.firings if f.after.next_due_date != f.before.next_due_date]
