import pytest

from database.db_manager import DatabaseManager
from database.ledger_store import LedgerStore
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction


def make_tx(id, date, amount, type_=None, category="Groceries", description="Item", payment=""):
    """Build a Transaction; type defaults from the sign of amount."""
    if type_ is None:
        type_ = "income" if amount > 0 else "expense"
    return Transaction(
        id=id, date=date, description=description, amount=amount,
        type=type_, category=category, payment=payment,
    )


def make_rule(id, next_due, frequency="monthly", amount=-9.99, description="Netflix",
              category="Subscriptions (Netflix, Spotify, etc)", payment="Card"):
    return RecurringTransaction(
        id=id, description=description, amount=amount,
        type="income" if amount > 0 else "expense",
        category=category, payment=payment, frequency=frequency,
        next_due_date=next_due,
    )


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager.open(str(tmp_path / "ledger.db"))
    yield manager
    manager.close()


@pytest.fixture
def store(db):
    return LedgerStore(db)
