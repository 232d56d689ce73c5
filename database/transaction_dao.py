from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            date=row["date"],
            description=row["description"],
            amount=row["amount"],
            type=row["type"],
            category=row["category"],
            payment=row["payment"],
        )

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date DESC, id DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_month(self, month: str) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM transactions
               WHERE substr(date, 1, 7) = ?
               ORDER BY date DESC, id DESC""",
            (month,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_months(self) -> list[str]:
        """Distinct YYYY-MM keys with at least one transaction, newest first."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT DISTINCT substr(date, 1, 7) AS month
               FROM transactions ORDER BY month DESC"""
        ).fetchall()
        return [r["month"] for r in rows]

    def create(
        self,
        date: str,
        description: str,
        amount: float,
        type_: str,
        category: str = "",
        payment: str = "",
        tx_id: int | None = None,
        commit: bool = True,
    ) -> int:
        """Insert a row and return its id. tx_id is only passed when restoring verbatim."""
        conn = self._db.get_connection()
        if tx_id is None:
            cursor = conn.execute(
                """INSERT INTO transactions
                   (date, description, amount, type, category, payment)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (date, description, amount, type_, category, payment),
            )
        else:
            cursor = conn.execute(
                """INSERT INTO transactions
                   (id, date, description, amount, type, category, payment)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (tx_id, date, description, amount, type_, category, payment),
            )
        if commit:
            conn.commit()
        return cursor.lastrowid

    def update(
        self,
        tx_id: int,
        date: str,
        description: str,
        amount: float,
        type_: str,
        category: str = "",
        payment: str = "",
    ) -> int:
        """Returns the number of rows changed (0 when the id is unknown)."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            """UPDATE transactions
               SET date=?, description=?, amount=?, type=?, category=?, payment=?
               WHERE id=?""",
            (date, description, amount, type_, category, payment, tx_id),
        )
        conn.commit()
        return cursor.rowcount

    def delete(self, tx_id: int) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        conn.commit()
        return cursor.rowcount
