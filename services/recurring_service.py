import logging
import threading
from datetime import date

from database.ledger_store import LedgerStore
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from services.recurrence import project_due
from services.validation import (
    check_date,
    check_frequency,
    check_type,
    clean_description,
    parse_amount,
    signed_amount,
)
from utils.constants import (
    CATCHUP_POLICIES,
    CATCHUP_SINGLE,
    OVERFLOW_POLICIES,
    OVERFLOW_ROLL,
)
from utils.date_helpers import today
from utils.errors import ValidationError

logger = logging.getLogger(__name__)


class RecurringService:
    def __init__(
        self,
        store: LedgerStore,
        catchup_policy: str = CATCHUP_SINGLE,
        month_overflow: str = OVERFLOW_ROLL,
    ):
        if catchup_policy not in CATCHUP_POLICIES:
            raise ValidationError(f"Unknown catch-up policy: {catchup_policy}")
        if month_overflow not in OVERFLOW_POLICIES:
            raise ValidationError(f"Unknown month overflow policy: {month_overflow}")
        self._store = store
        self._catchup = catchup_policy
        self._overflow = month_overflow
        self._in_flight = threading.Lock()

    @classmethod
    def from_settings(cls, store: LedgerStore) -> "RecurringService":
        db = store.db
        return cls(
            store,
            catchup_policy=db.get_setting("catchup_policy", CATCHUP_SINGLE),
            month_overflow=db.get_setting("month_overflow", OVERFLOW_ROLL),
        )

    def get_all(self) -> list[RecurringTransaction]:
        return self._store.list_recurring()

    def get_by_id(self, rule_id: int) -> RecurringTransaction | None:
        return self._store.get_recurring(rule_id)

    def create(
        self,
        description: str,
        amount,
        type_: str,
        frequency: str,
        next_due_date: str,
        category: str = "",
        payment: str = "",
    ) -> RecurringTransaction:
        fields = self._validate(
            description, amount, type_, frequency, next_due_date, category, payment
        )
        rule_id = self._store.create_recurring(**fields)
        logger.info("Created recurring transaction %s (%s)", rule_id, frequency)
        return self._to_model(rule_id, fields)

    def update(
        self,
        rule_id: int,
        description: str,
        amount,
        type_: str,
        frequency: str,
        next_due_date: str,
        category: str = "",
        payment: str = "",
    ) -> RecurringTransaction:
        fields = self._validate(
            description, amount, type_, frequency, next_due_date, category, payment
        )
        self._store.update_recurring(rule_id, **fields)
        return self._to_model(rule_id, fields)

    def delete(self, rule_id: int):
        self._store.delete_recurring(rule_id)
        logger.info("Deleted recurring transaction %s", rule_id)

    def apply_due(self, reference_date: date | None = None) -> list[Transaction]:
        """
        Materialize every due recurring transaction as of reference_date
        (default: today) and persist the results. Returns the stored transactions.

        Only one pass runs at a time per service; an overlapping call returns []
        so the same definition can never fire twice. Each definition's new
        transactions are written before its advanced due date, atomically; on a
        StorageError the pass stops and the failed definition fires again on
        the next check.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Recurring check already in progress; skipping")
            return []
        try:
            ref = reference_date or today()
            snapshot = self._store.load_snapshot()
            result = project_due(
                snapshot.recurring,
                snapshot.transactions,
                ref,
                catchup=self._catchup,
                overflow=self._overflow,
            )
            saved: list[Transaction] = []
            for firing in result.firings:
                recorded = self._store.record_firing(firing)
                for tx in recorded:
                    logger.info(
                        "Recurring %s fired: %s on %s, next due %s",
                        firing.after.id, tx.description, tx.date,
                        firing.after.next_due_date,
                    )
                saved.extend(recorded)
            return saved
        finally:
            self._in_flight.release()

    def _validate(
        self, description, amount, type_, frequency, next_due_date, category, payment
    ) -> dict:
        description = clean_description(description)
        magnitude = parse_amount(amount)
        check_type(type_)
        check_frequency(frequency)
        check_date(next_due_date, "Next due date")
        return {
            "description": description,
            "amount": signed_amount(magnitude, type_),
            "type_": type_,
            "category": (category or "").strip(),
            "payment": (payment or "").strip(),
            "frequency": frequency,
            "next_due_date": next_due_date,
        }

    @staticmethod
    def _to_model(rule_id: int, fields: dict) -> RecurringTransaction:
        return RecurringTransaction(
            id=rule_id,
            description=fields["description"],
            amount=fields["amount"],
            type=fields["type_"],
            category=fields["category"],
            payment=fields["payment"],
            frequency=fields["frequency"],
            next_due_date=fields["next_due_date"],
        )
