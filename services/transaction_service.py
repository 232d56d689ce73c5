import logging

from database.ledger_store import LedgerStore
from models.transaction import Transaction
from services.validation import (
    check_date,
    check_type,
    clean_description,
    parse_amount,
    signed_amount,
)

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, store: LedgerStore):
        self._store = store

    def get_all(self) -> list[Transaction]:
        return self._store.list_transactions()

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._store.get_transaction(tx_id)

    def get_for_month(self, month: str) -> list[Transaction]:
        return self._store.list_transactions_for_month(month)

    def available_months(self) -> list[str]:
        """Months with data, newest first, for a month picker."""
        return self._store.list_months()

    def create(
        self,
        date: str,
        description: str,
        amount,
        type_: str,
        category: str = "",
        payment: str = "",
    ) -> Transaction:
        """Validate, apply the sign convention and save. Returns the stored record."""
        fields = self._validate(date, description, amount, type_, category, payment)
        tx_id = self._store.create_transaction(**fields)
        logger.info("Created transaction %s (%s %.2f)", tx_id, type_, fields["amount"])
        return Transaction(id=tx_id, **self._as_model_fields(fields))

    def update(
        self,
        tx_id: int,
        date: str,
        description: str,
        amount,
        type_: str,
        category: str = "",
        payment: str = "",
    ) -> Transaction:
        fields = self._validate(date, description, amount, type_, category, payment)
        self._store.update_transaction(tx_id, **fields)
        return Transaction(id=tx_id, **self._as_model_fields(fields))

    def delete(self, tx_id: int):
        self._store.delete_transaction(tx_id)
        logger.info("Deleted transaction %s", tx_id)

    def _validate(self, date, description, amount, type_, category, payment) -> dict:
        description = clean_description(description)
        magnitude = parse_amount(amount)
        check_type(type_)
        check_date(date)
        return {
            "date": date,
            "description": description,
            "amount": signed_amount(magnitude, type_),
            "type_": type_,
            "category": (category or "").strip(),
            "payment": (payment or "").strip(),
        }

    @staticmethod
    def _as_model_fields(fields: dict) -> dict:
        model = dict(fields)
        model["type"] = model.pop("type_")
        return model
