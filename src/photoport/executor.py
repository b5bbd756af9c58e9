# idempotent import execution
import logging
import sqlite3
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS import_results(
  job_id TEXT NOT NULL,
  item_key TEXT NOT NULL,
  label TEXT,
  result TEXT NOT NULL,
  created_ts DATETIME DEFAULT CURRENT_TIMESTAMP,
  PRIMARY KEY(job_id, item_key)
);

CREATE TABLE IF NOT EXISTS import_errors(
  job_id TEXT NOT NULL,
  item_key TEXT NOT NULL,
  label TEXT,
  error_message TEXT NOT NULL,
  created_ts DATETIME DEFAULT CURRENT_TIMESTAMP,
  PRIMARY KEY(job_id, item_key)
);

CREATE INDEX IF NOT EXISTS idx_import_errors_job ON import_errors(job_id);
"""


@dataclass(frozen=True)
class ErrorDetail:
    """A failed item, kept for the host to report."""

    key: str
    label: str
    message: str
    created_ts: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ImportResultStore(Protocol):
    """Durable (job, key) -> result mapping backing the executor."""

    def try_get_existing(self, job_id: str, key: str) -> str | None: ...

    def record_result(self, job_id: str, key: str, label: str, result: str) -> None: ...

    def record_error(self, job_id: str, key: str, label: str, message: str) -> None: ...

    def clear_error(self, job_id: str, key: str) -> None: ...

    def get_errors(self, job_id: str) -> list[ErrorDetail]: ...


class InMemoryResultStore:
    """Process-local store. Results are lost when the process exits."""

    def __init__(self):
        self._results: dict[tuple[str, str], str] = {}
        self._errors: dict[tuple[str, str], ErrorDetail] = {}
        self._lock = threading.Lock()

    def try_get_existing(self, job_id: str, key: str) -> str | None:
        with self._lock:
            return self._results.get((job_id, key))

    def record_result(self, job_id: str, key: str, label: str, result: str) -> None:
        with self._lock:
            self._results.setdefault((job_id, key), result)

    def record_error(self, job_id: str, key: str, label: str, message: str) -> None:
        with self._lock:
            self._errors[(job_id, key)] = ErrorDetail(key=key, label=label, message=message)

    def clear_error(self, job_id: str, key: str) -> None:
        with self._lock:
            self._errors.pop((job_id, key), None)

    def get_errors(self, job_id: str) -> list[ErrorDetail]:
        with self._lock:
            return [err for (job, _), err in self._errors.items() if job == job_id]

    def close(self):
        pass


class SqliteResultStore:
    """
    SQLite-backed result store.

    Uses thread-local connections so each thread has its own connection, and a
    write lock to serialize inserts. Recorded results survive restarts, which is
    what lets a retried job skip items it already imported.
    """

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self._write_lock = threading.Lock()

        conn = self._get_conn()
        conn.executescript(SCHEMA)
        conn.commit()

    def _get_conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self._local, "conn") or self._local.conn is None:
            self._local.conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=30.0,  # Wait up to 30s if database is locked
            )
        conn: sqlite3.Connection = self._local.conn
        return conn

    def try_get_existing(self, job_id: str, key: str) -> str | None:
        conn = self._get_conn()
        cur = conn.execute(
            "SELECT result FROM import_results WHERE job_id=? AND item_key=?",
            (job_id, key),
        )
        row = cur.fetchone()
        return row[0] if row is not None else None

    def record_result(self, job_id: str, key: str, label: str, result: str) -> None:
        # First recorded result wins; a key is never remapped
        with self._write_lock:
            conn = self._get_conn()
            conn.execute(
                "INSERT OR IGNORE INTO import_results(job_id, item_key, label, result) "
                "VALUES(?,?,?,?)",
                (job_id, key, label, result),
            )
            conn.commit()

    def record_error(self, job_id: str, key: str, label: str, message: str) -> None:
        with self._write_lock:
            conn = self._get_conn()
            conn.execute(
                "INSERT OR REPLACE INTO import_errors(job_id, item_key, label, error_message) "
                "VALUES(?,?,?,?)",
                (job_id, key, label, message),
            )
            conn.commit()

    def clear_error(self, job_id: str, key: str) -> None:
        with self._write_lock:
            conn = self._get_conn()
            conn.execute(
                "DELETE FROM import_errors WHERE job_id=? AND item_key=?",
                (job_id, key),
            )
            conn.commit()

    def get_errors(self, job_id: str) -> list[ErrorDetail]:
        conn = self._get_conn()
        cur = conn.execute(
            "SELECT item_key, label, error_message, created_ts FROM import_errors "
            "WHERE job_id=? ORDER BY created_ts ASC",
            (job_id,),
        )
        return [
            ErrorDetail(
                key=row[0],
                label=row[1] or "",
                message=row[2],
                # CURRENT_TIMESTAMP is UTC
                created_ts=datetime.fromisoformat(row[3]).replace(tzinfo=timezone.utc),
            )
            for row in cur.fetchall()
        ]

    def close(self):
        """Close the calling thread's connection. Call on shutdown."""
        if hasattr(self._local, "conn") and self._local.conn is not None:
            self._local.conn.close()
            self._local.conn = None


def get_result_store(backend: str, **kwargs):
    """
    Factory function to create a result store.

    Args:
        backend: "memory" or "sqlite"
        **kwargs: Backend-specific arguments:
            For SQLite: db_path (str)

    Returns:
        InMemoryResultStore or SqliteResultStore instance

    Examples:
        store = get_result_store("sqlite", db_path="./photoport_state.sqlite3")
    """
    if backend == "memory":
        return InMemoryResultStore()
    elif backend == "sqlite":
        return SqliteResultStore(kwargs["db_path"])
    else:
        raise ValueError(f"Unknown result store backend: {backend}")


class IdempotentImportExecutor:
    """
    Runs each keyed import step at most once per job.

    A step whose result is already recorded for the current job is not run
    again; its recorded result is returned instead. Failures are recorded so
    the host can see which items did not import.
    """

    def __init__(self, store: ImportResultStore, job_id: str | None = None):
        self.store = store
        self.job_id = job_id

    def set_job_id(self, job_id) -> None:
        self.job_id = str(job_id)

    def _require_job_id(self) -> str:
        if self.job_id is None:
            raise RuntimeError("Job id must be set before executing import steps")
        return str(self.job_id)

    def is_key_cached(self, key: str) -> bool:
        return self.store.try_get_existing(self._require_job_id(), key) is not None

    def get_cached_value(self, key: str) -> str:
        value = self.store.try_get_existing(self._require_job_id(), key)
        if value is None:
            raise KeyError(f"No result recorded for key {key!r}")
        return value

    def execute_or_raise(self, key: str, label: str, producer: Callable[[], str]) -> str:
        """
        Run producer unless key already has a result for this job.

        Store errors are not wrapped. If the result can't be recorded after
        producer succeeded, the store error propagates and aborts the caller;
        the unrecorded result is logged so the remote item can be traced.

        Raises:
            IOError: If producer raised; the original exception is chained
        """
        job_id = self._require_job_id()
        existing = self.store.try_get_existing(job_id, key)
        if existing is not None:
            logger.debug(f"Skipping {label!r} ({key}): already imported as {existing}")
            return existing

        try:
            result = producer()
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            self.store.record_error(job_id, key, label, message)
            logger.error(f"Problem with importing {label!r} ({key}): {message}")
            raise IOError(f"Failed to import {label!r} ({key}): {message}") from e

        try:
            self.store.record_result(job_id, key, label, result)
        except Exception:
            logger.error(
                f"Imported {label!r} ({key}) as {result} but could not record it; "
                "a rerun may create it again"
            )
            raise
        self.store.clear_error(job_id, key)
        return result

    def execute_and_swallow_io_exceptions(
        self, key: str, label: str, producer: Callable[[], str]
    ) -> str | None:
        """Like execute_or_raise, but a failed step returns None instead of raising."""
        try:
            return self.execute_or_raise(key, label, producer)
        except IOError as e:
            logger.debug(f"Swallowed failure for {key}: {e}")
            return None

    run_once = execute_and_swallow_io_exceptions

    def errors(self) -> list[ErrorDetail]:
        """Failed items for the current job."""
        return self.store.get_errors(self._require_job_id())
