import logging
import sqlite3
import threading
import time
from pathlib import Path

from db.models import SCHEMA_SQL, PoemRecord

logger = logging.getLogger(__name__)

MILLIS_PER_HOUR = 60 * 60 * 1000


class Database:
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        if not self.db_path.parent.exists():
            logger.info("Creating database directory: %s", self.db_path.parent)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._local = threading.local()
        self._conns: list[tuple[threading.Thread, sqlite3.Connection]] = []
        self._conns_lock = threading.Lock()
        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        if getattr(self._local, "conn", None) is None:
            # Opened per thread; check_same_thread is off so close() can run from the main thread
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            self._local.conn = conn
            with self._conns_lock:
                # Worker threads are short-lived; drop connections whose thread has exited
                alive = []
                for thread, other in self._conns:
                    if thread.is_alive():
                        alive.append((thread, other))
                    else:
                        other.close()
                alive.append((threading.current_thread(), conn))
                self._conns = alive
        return self._local.conn

    def _init_schema(self):
        conn = self._get_conn()
        conn.executescript(SCHEMA_SQL)
        conn.commit()

    def execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        conn = self._get_conn()
        cursor = conn.execute(sql, params)
        conn.commit()
        return cursor

    def fetchall(self, sql: str, params: tuple = ()) -> list[dict]:
        cursor = self._get_conn().execute(sql, params)
        return [dict(row) for row in cursor.fetchall()]

    def save_poem(self, record: PoemRecord) -> bool:
        try:
            self.execute(
                "INSERT INTO poems (timestamp, time_string, poem, model_used) VALUES (?, ?, ?, ?)",
                (record.timestamp, record.time_label, record.text, record.model_id),
            )
        except sqlite3.Error as e:
            logger.error("Error saving poem to database: %s", e)
            return False
        logger.info("Poem saved to database for %s", record.time_label)
        return True

    def prune_poems(self, retention_hours: int, now_ms: int | None = None) -> int:
        """Delete poems older than the retention window and return how many went."""
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        cutoff = now_ms - retention_hours * MILLIS_PER_HOUR
        try:
            cursor = self.execute("DELETE FROM poems WHERE timestamp < ?", (cutoff,))
        except sqlite3.Error as e:
            logger.error("Error cleaning up old poems: %s", e)
            return 0
        if cursor.rowcount > 0:
            logger.info("Cleaned up %d old poem(s)", cursor.rowcount)
        return cursor.rowcount

    def list_recent(self, limit: int) -> list[PoemRecord]:
        rows = self.fetchall("SELECT * FROM poems ORDER BY timestamp DESC LIMIT ?", (limit,))
        return [PoemRecord.from_row(r) for r in rows]

    def close(self):
        with self._conns_lock:
            conns, self._conns = self._conns, []
        for _, conn in conns:
            conn.close()
        self._local = threading.local()
