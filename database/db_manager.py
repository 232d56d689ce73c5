import logging
import os
import sqlite3
from utils.constants import DB_FILE, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            folder = os.path.dirname(os.path.abspath(self.db_path))
            if self.db_path != ":memory:":
                os.makedirs(folder, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
            logger.debug("Opened database %s", self.db_path)
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS transactions (
                id          INTEGER PRIMARY KEY AUTOINCREMENT,
                date        TEXT NOT NULL,
                description TEXT NOT NULL,
                amount      REAL NOT NULL,
                type        TEXT NOT NULL CHECK(type IN ('expense','income')),
                category    TEXT NOT NULL DEFAULT '',
                payment     TEXT NOT NULL DEFAULT ''
            );

            CREATE TABLE IF NOT EXISTS recurring_transactions (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                description   TEXT NOT NULL,
                amount        REAL NOT NULL,
                type          TEXT NOT NULL CHECK(type IN ('expense','income')),
                category      TEXT NOT NULL DEFAULT '',
                payment       TEXT NOT NULL DEFAULT '',
                frequency     TEXT NOT NULL CHECK(frequency IN ('daily','weekly','monthly')),
                next_due_date TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_recurring_next_due
                ON recurring_transactions(next_due_date);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS.items():
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    def clear_all(self, commit: bool = True):
        """Delete every transaction and recurring definition. Settings are kept."""
        conn = self.get_connection()
        conn.execute("DELETE FROM transactions")
        conn.execute("DELETE FROM recurring_transactions")
        if commit:
            conn.commit()

    @staticmethod
    def open(db_path: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) and initialize the ledger DB."""
        db = DatabaseManager(db_path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
