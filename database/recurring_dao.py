from typing import Optional
from database.db_manager import DatabaseManager
from models.recurring_transaction import RecurringTransaction


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringTransaction:
        return RecurringTransaction(
            id=row["id"],
            description=row["description"],
            amount=row["amount"],
            type=row["type"],
            category=row["category"],
            payment=row["payment"],
            frequency=row["frequency"],
            next_due_date=row["next_due_date"],
        )

    def get_all(self) -> list[RecurringTransaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_transactions ORDER BY id"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, rule_id: int) -> Optional[RecurringTransaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_transactions WHERE id = ?", (rule_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        description: str,
        amount: float,
        type_: str,
        category: str,
        payment: str,
        frequency: str,
        next_due_date: str,
        rule_id: int | None = None,
        commit: bool = True,
    ) -> int:
        conn = self._db.get_connection()
        columns = "description, amount, type, category, payment, frequency, next_due_date"
        values = [description, amount, type_, category, payment, frequency, next_due_date]
        if rule_id is not None:
            columns = "id, " + columns
            values.insert(0, rule_id)
        placeholders = ", ".join("?" * len(values))
        cursor = conn.execute(
            f"INSERT INTO recurring_transactions ({columns}) VALUES ({placeholders})",
            values,
        )
        if commit:
            conn.commit()
        return cursor.lastrowid

    def update(
        self,
        rule_id: int,
        description: str,
        amount: float,
        type_: str,
        category: str,
        payment: str,
        frequency: str,
        next_due_date: str,
    ) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE recurring_transactions SET
               description=?, amount=?, type=?, category=?, payment=?,
               frequency=?, next_due_date=?
               WHERE id=?""",
            (
                description, amount, type_, category, payment,
                frequency, next_due_date, rule_id,
            ),
        )
        conn.commit()
        return cursor.rowcount

    def update_next_due_date(self, rule_id: int, date_str: str, commit: bool = True) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE recurring_transactions SET next_due_date = ? WHERE id = ?",
            (date_str, rule_id),
        )
        if commit:
            conn.commit()
        return cursor.rowcount

    def delete(self, rule_id: int) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "DELETE FROM recurring_transactions WHERE id = ?", (rule_id,)
        )
        conn.commit()
        return cursor.rowcount
