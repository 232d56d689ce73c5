"""CRUD facade over the transaction and recurring tables.

Every sqlite failure leaves this module as a StorageError; callers reload
their snapshot afterwards instead of trusting what they had in memory.
"""
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterable

from database.db_manager import DatabaseManager
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.ledger import Firing, LedgerSnapshot
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from utils.errors import StorageError

logger = logging.getLogger(__name__)


class LedgerStore:
    def __init__(self, db: DatabaseManager):
        self._db = db
        self._tx_dao = TransactionDAO(db)
        self._recurring_dao = RecurringDAO(db)

    @property
    def db(self) -> DatabaseManager:
        return self._db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except sqlite3.Error as exc:
            logger.exception("Storage error while trying to %s", action)
            raise StorageError(f"Could not {action}: {exc}") from exc

    @contextmanager
    def _atomic(self, action: str):
        """Run several writes as one sqlite transaction; roll all back on failure."""
        conn = self._db.get_connection()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Storage error while trying to %s; rolled back", action)
            raise StorageError(f"Could not {action}: {exc}") from exc
        except Exception:
            conn.rollback()
            raise

    # ── Transactions ──────────────────────────────────────────────────────────

    def list_transactions(self) -> list[Transaction]:
        with self._guard("list transactions"):
            return self._tx_dao.get_all()

    def list_transactions_for_month(self, month: str) -> list[Transaction]:
        with self._guard(f"list transactions for {month}"):
            return self._tx_dao.get_by_month(month)

    def list_months(self) -> list[str]:
        with self._guard("list months"):
            return self._tx_dao.get_months()

    def get_transaction(self, tx_id: int) -> Transaction | None:
        with self._guard(f"read transaction {tx_id}"):
            return self._tx_dao.get_by_id(tx_id)

    def create_transaction(
        self,
        date: str,
        description: str,
        amount: float,
        type_: str,
        category: str = "",
        payment: str = "",
    ) -> int:
        with self._guard("save transaction"):
            return self._tx_dao.create(date, description, amount, type_, category, payment)

    def update_transaction(
        self,
        tx_id: int,
        date: str,
        description: str,
        amount: float,
        type_: str,
        category: str = "",
        payment: str = "",
    ) -> None:
        with self._guard(f"update transaction {tx_id}"):
            changed = self._tx_dao.update(
                tx_id, date, description, amount, type_, category, payment
            )
        if not changed:
            raise StorageError(f"Transaction {tx_id} does not exist.")

    def delete_transaction(self, tx_id: int) -> None:
        with self._guard(f"delete transaction {tx_id}"):
            deleted = self._tx_dao.delete(tx_id)
        if not deleted:
            raise StorageError(f"Transaction {tx_id} does not exist.")

    # ── Recurring definitions ─────────────────────────────────────────────────

    def list_recurring(self) -> list[RecurringTransaction]:
        with self._guard("list recurring transactions"):
            return self._recurring_dao.get_all()

    def get_recurring(self, rule_id: int) -> RecurringTransaction | None:
        with self._guard(f"read recurring transaction {rule_id}"):
            return self._recurring_dao.get_by_id(rule_id)

    def create_recurring(
        self,
        description: str,
        amount: float,
        type_: str,
        category: str,
        payment: str,
        frequency: str,
        next_due_date: str,
    ) -> int:
        with self._guard("save recurring transaction"):
            return self._recurring_dao.create(
                description, amount, type_, category, payment, frequency, next_due_date
            )

    def update_recurring(
        self,
        rule_id: int,
        description: str,
        amount: float,
        type_: str,
        category: str,
        payment: str,
        frequency: str,
        next_due_date: str,
    ) -> None:
        with self._guard(f"update recurring transaction {rule_id}"):
            changed = self._recurring_dao.update(
                rule_id, description, amount, type_, category, payment,
                frequency, next_due_date,
            )
        if not changed:
            raise StorageError(f"Recurring transaction {rule_id} does not exist.")

    def delete_recurring(self, rule_id: int) -> None:
        with self._guard(f"delete recurring transaction {rule_id}"):
            deleted = self._recurring_dao.delete(rule_id)
        if not deleted:
            raise StorageError(f"Recurring transaction {rule_id} does not exist.")

    # ── Bulk ──────────────────────────────────────────────────────────────────

    def clear_all(self) -> None:
        with self._atomic("clear all data"):
            self._db.clear_all(commit=False)
        logger.info("Cleared all transactions and recurring transactions")

    def load_snapshot(self) -> LedgerSnapshot:
        with self._guard("load ledger"):
            return LedgerSnapshot.of(
                self._tx_dao.get_all(), self._recurring_dao.get_all()
            )

    def record_firing(self, firing: Firing) -> list[Transaction]:
        """Persist a firing's generated transactions, then its advanced due date.

        Both land in one sqlite transaction. The generated rows get store ids;
        the provisional ids on firing.transactions are ignored.
        """
        rule = firing.after
        saved: list[Transaction] = []
        with self._atomic(f"record recurring transaction {rule.id}") as conn:
            for tx in firing.transactions:
                new_id = self._tx_dao.create(
                    tx.date, tx.description, tx.amount, tx.type,
                    tx.category, tx.payment, commit=False,
                )
                saved.append(Transaction(
                    id=new_id, date=tx.date, description=tx.description,
                    amount=tx.amount, type=tx.type, category=tx.category,
                    payment=tx.payment,
                ))
            changed = self._recurring_dao.update_next_due_date(
                rule.id, rule.next_due_date, commit=False
            )
            if not changed:
                # Definition deleted since the snapshot was taken.
                conn.rollback()
                logger.warning("Recurring transaction %s vanished; nothing recorded", rule.id)
                return []
        return saved

    def replace_all(
        self,
        transactions: Iterable[Transaction],
        recurring: Iterable[RecurringTransaction],
    ) -> None:
        """Clear the ledger and insert the given records with their ids unchanged.

        Records without an id are inserted after every explicit id, so the
        ids AUTOINCREMENT hands them cannot collide.
        """
        transactions = sorted(transactions, key=lambda t: t.id is None)
        recurring = sorted(recurring, key=lambda r: r.id is None)
        with self._atomic("replace ledger") as conn:
            self._db.clear_all(commit=False)
            conn.execute(
                "DELETE FROM sqlite_sequence WHERE name IN "
                "('transactions', 'recurring_transactions')"
            )
            for tx in transactions:
                self._tx_dao.create(
                    tx.date, tx.description, tx.amount, tx.type, tx.category,
                    tx.payment, tx_id=tx.id, commit=False,
                )
            for r in recurring:
                self._recurring_dao.create(
                    r.description, r.amount, r.type, r.category, r.payment,
                    r.frequency, r.next_due_date, rule_id=r.id, commit=False,
                )

    def append_all(
        self,
        transactions: Iterable[Transaction],
        recurring: Iterable[RecurringTransaction],
    ) -> None:
        """Insert the given records with fresh store-assigned ids."""
        with self._atomic("import ledger"):
            for tx in transactions:
                self._tx_dao.create(
                    tx.date, tx.description, tx.amount, tx.type, tx.category,
                    tx.payment, commit=False,
                )
            for r in recurring:
                self._recurring_dao.create(
                    r.description, r.amount, r.type, r.category, r.payment,
                    r.frequency, r.next_due_date, commit=False,
                )
