from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

from fastapi import Request

from movie_backend.errors import StoreUnavailable
from movie_backend.schema import get_schema_sql


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _sqlite_path(db_path: str) -> str:
    p = (db_path or "").strip()
    # Support sqlite:///path style
    if p.lower().startswith("sqlite:///"):
        p = p[len("sqlite:///") :]
    return p or "./database.sqlite"


class Database:
    """The single SQLite connection shared by every request.

    Opened once at application startup and closed at shutdown. All access
    goes through ``transaction()``, which serializes callers on a lock and
    commits or rolls back the unit of work. SQLite errors leave this class
    as ``StoreUnavailable``.
    """

    def __init__(self, db_path: str) -> None:
        self.db_path = _sqlite_path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> "Database":
        if self._conn is not None:
            return self
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, timeout=30, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        if self.db_path != ":memory:":
            conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA busy_timeout=5000;")  # 5s
        self._conn = conn
        _debug(f"Connected to SQLite database at {self.db_path}")
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                _debug("Database connection closed")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        if self._conn is None:
            raise StoreUnavailable("database is not open")
        with self._lock:
            conn = self._conn
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                _debug(f"Store error: {e}")
                raise StoreUnavailable(str(e)) from e
            except Exception:
                conn.rollback()
                raise

    def init_schema(self) -> None:
        """Create all tables (idempotent)."""
        _debug(f"Initializing schema at {self.db_path}")
        with self.transaction() as conn:
            conn.executescript(get_schema_sql())


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's Database."""
    db: Any = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreUnavailable("database is not configured")
    return db
