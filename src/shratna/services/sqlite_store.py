"""SQLite-backed property store.

Keeps properties in a two-column table shaped like a host application's
global property table:

    CREATE TABLE global_property (
        property TEXT PRIMARY KEY,
        property_value TEXT
    )

Several processes can point at the same database file and share one
configuration namespace.
"""

import logging
import re
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from ..interfaces import IPropertyStore

logger = logging.getLogger(__name__)

_TABLE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SQLitePropertyStore(IPropertyStore):
    """Durable property store on a single SQLite connection.

    The connection is shared across threads (``check_same_thread=False``)
    and every statement runs under an RLock. WAL mode lets other processes
    read while this one writes.

    Usage:
        with SQLitePropertyStore("~/.shr-atna/properties.db") as store:
            store.write("shr.id.root", "1.2.3")
            store.read("shr.id.root")
    """

    def __init__(self, db_path: str | Path, table_name: str = "global_property"):
        """Open (and create if needed) the property database.

        Args:
            db_path: Path to the SQLite database file. Parent directories
                are created if missing.
            table_name: Name of the property table.

        Raises:
            ValueError: If table_name is not a plain SQL identifier.
        """
        if not _TABLE_NAME_RE.match(table_name):
            raise ValueError(f"Invalid table name: {table_name!r}")

        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.table_name = table_name

        self._conn: Optional[sqlite3.Connection] = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
        )
        self._lock = threading.RLock()
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._init_schema()
        logger.info(f"Opened property store at {self.db_path} (table: {table_name})")

    def _init_schema(self) -> None:
        with self._lock:
            self._conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    property TEXT PRIMARY KEY,
                    property_value TEXT
                )
            """)
            self._conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Property store is closed")
        return self._conn

    def read(self, name: str) -> Optional[str]:
        with self._lock:
            row = self._get_conn().execute(
                f"SELECT property_value FROM {self.table_name} WHERE property = ?",
                (name,),
            ).fetchone()
        return row[0] if row else None

    def write(self, name: str, value: str) -> None:
        with self._lock:
            conn = self._get_conn()
            conn.execute(
                f"INSERT OR REPLACE INTO {self.table_name} (property, property_value) "
                "VALUES (?, ?)",
                (name, value),
            )
            conn.commit()

    def names(self) -> list[str]:
        with self._lock:
            rows = self._get_conn().execute(
                f"SELECT property FROM {self.table_name} ORDER BY property"
            ).fetchall()
        return [row[0] for row in rows]

    def close(self) -> None:
        """Close the connection. Idempotent."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __repr__(self) -> str:
        return f"SQLitePropertyStore(path={str(self.db_path)!r}, table={self.table_name!r})"
