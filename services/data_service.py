"""Export and import the whole ledger (transactions and recurring transactions)
as JSON or CSV-in-ZIP.

JSON layout: {"transactions": [...], "recurringTransactions": [...]}. A bare
list of transactions is also accepted on import.
"""
import csv
import io
import logging
import math
import zipfile

from database.ledger_store import LedgerStore
from models.recurring_transaction import RecurringTransaction
from models.transaction import Transaction
from utils.constants import FREQUENCIES, TRANSACTION_TYPES
from utils.date_helpers import parse_date, today_str
from utils.errors import ImportFormatError

logger = logging.getLogger(__name__)

IMPORT_MODES = ("merge", "replace")

TRANSACTION_FIELDS = ["id", "date", "description", "amount", "type", "category", "payment"]
RECURRING_FIELDS = [
    "id", "description", "amount", "type", "category", "payment", "frequency", "nextDueDate",
]


def default_export_filename() -> str:
    return f"finance-tracker-{today_str()}.json"


class DataService:
    def __init__(self, store: LedgerStore):
        self._store = store

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        snapshot = self._store.load_snapshot()
        data = {
            "transactions": [self._transaction_to_dict(t) for t in snapshot.transactions],
            "recurringTransactions": [self._recurring_to_dict(r) for r in snapshot.recurring],
        }
        logger.info(
            "Exported %d transactions and %d recurring transactions",
            len(data["transactions"]), len(data["recurringTransactions"]),
        )
        return data

    def export_csv_zip(self, path: str) -> None:
        """Write a ZIP archive containing one CSV per record type."""
        data = self.export_json()
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
            for key, fname, fields in [
                ("transactions", "transactions.csv", TRANSACTION_FIELDS),
                ("recurringTransactions", "recurring_transactions.csv", RECURRING_FIELDS),
            ]:
                buf = io.StringIO()
                writer = csv.DictWriter(buf, fieldnames=fields)
                writer.writeheader()
                writer.writerows(data[key])
                zf.writestr(fname, buf.getvalue())

    # ── Import ────────────────────────────────────────────────────────────────

    def import_json(self, data, mode: str) -> dict:
        """Import a previously exported payload.

        mode: 'merge' appends everything with fresh ids; 'replace' clears the
        ledger and restores the records with their ids. The payload is
        validated in full first; ImportFormatError means nothing was written.
        Returns {"transactions": n, "recurring": m}.
        """
        if mode not in IMPORT_MODES:
            raise ImportFormatError(f"Unknown import mode: {mode}")

        if isinstance(data, list):
            raw_txs, raw_recurring = data, []
        elif isinstance(data, dict) and isinstance(data.get("transactions"), list):
            raw_txs = data["transactions"]
            raw_recurring = data.get("recurringTransactions") or []
            if not isinstance(raw_recurring, list):
                raise ImportFormatError("'recurringTransactions' must be a list.")
        else:
            raise ImportFormatError(
                "Expected a list of transactions or an object with a 'transactions' list."
            )

        transactions = [self._parse_transaction(i, t) for i, t in enumerate(raw_txs)]
        recurring = [self._parse_recurring(i, r) for i, r in enumerate(raw_recurring)]

        if mode == "replace":
            self._check_unique_ids(transactions, "transaction")
            self._check_unique_ids(recurring, "recurring transaction")
            self._store.replace_all(transactions, recurring)
        else:
            self._store.append_all(transactions, recurring)

        stats = {"transactions": len(transactions), "recurring": len(recurring)}
        logger.info("Imported (%s) %s", mode, stats)
        return stats

    def import_csv_zip(self, path: str, mode: str) -> dict:
        """Import from a ZIP archive of CSVs."""
        try:
            with zipfile.ZipFile(path, "r") as zf:
                names = zf.namelist()

                def read_csv(fname):
                    if fname not in names:
                        return []
                    with zf.open(fname) as f:
                        reader = csv.DictReader(io.TextIOWrapper(f, encoding="utf-8"))
                        return list(reader)

                transactions = read_csv("transactions.csv")
                recurring = read_csv("recurring_transactions.csv")
        except zipfile.BadZipFile as exc:
            raise ImportFormatError(f"Not a ZIP archive: {path}") from exc

        # Coerce CSV string values to proper Python types
        for row in transactions + recurring:
            raw = str(row.get("id") or "").strip()
            row["id"] = int(raw) if raw.isdigit() else None
            try:
                row["amount"] = float(row.get("amount") or "")
            except ValueError:
                pass  # left as text; rejected by validation below

        return self.import_json(
            {"transactions": transactions, "recurringTransactions": recurring}, mode
        )

    # ── Private builders ──────────────────────────────────────────────────────

    @staticmethod
    def _transaction_to_dict(t: Transaction) -> dict:
        return {
            "id": t.id,
            "date": t.date,
            "description": t.description,
            "amount": t.amount,
            "type": t.type,
            "category": t.category,
            "payment": t.payment,
        }

    @staticmethod
    def _recurring_to_dict(r: RecurringTransaction) -> dict:
        return {
            "id": r.id,
            "description": r.description,
            "amount": r.amount,
            "type": r.type,
            "category": r.category,
            "payment": r.payment,
            "frequency": r.frequency,
            "nextDueDate": r.next_due_date,
        }

    # ── Private parsing ───────────────────────────────────────────────────────

    def _common_fields(self, kind: str, index: int, record) -> dict:
        where = f"{kind} #{index}"
        if not isinstance(record, dict):
            raise ImportFormatError(f"{where} is not an object.")

        description = record.get("description")
        if not isinstance(description, str) or not description.strip():
            raise ImportFormatError(f"{where} has no description.")

        amount = record.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ImportFormatError(f"{where} has a missing or non-numeric amount.")

        if not math.isfinite(amount) or amount == 0:
            raise ImportFormatError(f"{where} has a zero or non-finite amount.")

        type_ = record.get("type")
        if type_ not in TRANSACTION_TYPES:
            raise ImportFormatError(f"{where} has invalid type {type_!r}.")
        if (amount > 0) != (type_ == "income"):
            raise ImportFormatError(
                f"{where} has amount {amount} whose sign does not match type {type_!r}."
            )

        fields = {
            "id": self._parse_id(where, record.get("id")),
            "description": description,
            "amount": float(amount),
            "type": type_,
        }
        for name in ("category", "payment"):
            value = record.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise ImportFormatError(f"{where} has a non-text {name}.")
            fields[name] = value
        return fields

    @staticmethod
    def _parse_id(where: str, value) -> int | None:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ImportFormatError(f"{where} has invalid id {value!r}.")
        return value

    def _parse_transaction(self, index: int, record) -> Transaction:
        fields = self._common_fields("Transaction", index, record)
        date_ = record.get("date")
        if not parse_date(date_):
            raise ImportFormatError(f"Transaction #{index} has invalid date {date_!r}.")
        return Transaction(date=date_, **fields)

    def _parse_recurring(self, index: int, record) -> RecurringTransaction:
        fields = self._common_fields("Recurring transaction", index, record)
        frequency = record.get("frequency")
        if frequency not in FREQUENCIES:
            raise ImportFormatError(
                f"Recurring transaction #{index} has invalid frequency {frequency!r}."
            )
        next_due = record.get("nextDueDate")
        if not parse_date(next_due):
            raise ImportFormatError(
                f"Recurring transaction #{index} has invalid nextDueDate {next_due!r}."
            )
        return RecurringTransaction(frequency=frequency, next_due_date=next_due, **fields)

    @staticmethod
    def _check_unique_ids(records, kind: str):
        seen = set()
        for r in records:
            if r.id is None:
                continue
            if r.id in seen:
                raise ImportFormatError(f"Duplicate {kind} id {r.id}.")
            seen.add(r.id)
