import logging
import os
import sqlite3
import threading

from utils.constants import DB_FILE

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        # One shared connection; the migration worker pool serializes on this.
        self.lock = threading.RLock()

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            folder = os.path.dirname(os.path.abspath(self.db_path))
            os.makedirs(folder, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema."""
        with self.lock:
            conn = self.get_connection()
            self._create_schema(conn)
            conn.commit()
        logger.debug("Record store ready at %s", self.db_path)

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS records (
                id          TEXT PRIMARY KEY,
                owner_id    TEXT NOT NULL,
                category    TEXT NOT NULL,
                fields      TEXT NOT NULL DEFAULT '{}',
                created_at  TEXT NOT NULL,
                updated_at  TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_records_owner_category ON records(owner_id, category);
        """)

    @staticmethod
    def open_in_folder(data_folder: str) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) collection.db inside data_folder."""
        db = DatabaseManager(os.path.join(data_folder, DB_FILE))
        db.initialize()
        return db

    def close(self):
        with self.lock:
            if self._conn:
                self._conn.close()
                self._conn = None
