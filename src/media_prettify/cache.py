"""External metadata cache consulted by the fuzzy enricher.

MetadataCache is the interface the prettifier depends on: get() reads a
cached entry, request() asks for one to be populated without waiting for it.

MetadataStore implements it on SQLite. Lookups run on a small thread pool
through a fetcher callable (see api.tmdb.lookup); at most one lookup per file
identity is in flight at a time. Thread-safe via per-thread connections and
SQLite's built-in locking, like the rest of the WAL-mode databases here.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from loguru import logger

from .errors import CacheError
from .models import EnrichmentResult, FileRef

log = logger.bind(stage="cache")

Fetcher = Callable[[str], EnrichmentResult | None]

_SCHEMA = """\
PRAGMA journal_mode=WAL;
PRAGMA busy_timeout=5000;

CREATE TABLE IF NOT EXISTS metadata (
    file_identity TEXT PRIMARY KEY,
    search_key    TEXT NOT NULL,
    title         TEXT NOT NULL,
    year          TEXT,
    episode_name  TEXT,
    fetched_at    TEXT NOT NULL
);
"""


class MetadataCache(Protocol):
    """What the prettifier needs from a metadata cache."""

    def get(self, file_identity: FileRef) -> EnrichmentResult | None: ...

    def request(self, file_identity: FileRef, search_key: str) -> None: ...


def _utcnow() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class MetadataStore:
    """SQLite-backed MetadataCache with background population.

    db_path must be a file: every thread opens its own connection, so an
    in-memory database would not be shared with the lookup workers.
    Without a fetcher, request() only logs and the store is read-only.
    """

    def __init__(
        self,
        db_path: Path,
        fetcher: Fetcher | None = None,
        max_workers: int = 2,
    ) -> None:
        self.db_path = db_path
        self.fetcher = fetcher
        self._local = threading.local()
        self._lock = threading.Lock()
        self._in_flight: set[str] = set()
        # Pending lookups only; finished futures drop out via _forget
        self._futures: set[Future] = set()
        self._finished = 0
        self._closed = False
        self._executor = (
            ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="metadata-lookup",
            )
            if fetcher is not None
            else None
        )
        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create a per-thread SQLite connection."""
        conn = getattr(self._local, "conn", None)
        if conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), timeout=10.0)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
            self._local.conn = conn
        return conn

    def _init_schema(self) -> None:
        conn = self._get_conn()
        conn.executescript(_SCHEMA)
        conn.commit()

    # -- MetadataCache API --

    def get(self, file_identity: FileRef) -> EnrichmentResult | None:
        """Return the cached entry, or None if it has not been fetched yet."""
        row = self._get_conn().execute(
            "SELECT title, year, episode_name FROM metadata WHERE file_identity = ?",
            (str(file_identity),),
        ).fetchone()
        if row is None:
            return None
        return EnrichmentResult(
            title=row["title"],
            year=row["year"],
            episode_name=row["episode_name"],
        )

    def request(self, file_identity: FileRef, search_key: str) -> None:
        """Schedule a lookup of search_key for file_identity and return.

        Ignored while a lookup for the same identity is still running.
        Raises CacheError once the store is closed.
        """
        key = str(file_identity)
        with self._lock:
            if self._closed:
                raise CacheError(f"MetadataStore at {self.db_path} is closed")
            if self._executor is None:
                log.debug(f"No fetcher configured, ignoring request for {key}")
                return
            if key in self._in_flight:
                log.debug(f"Lookup already in flight for {key}")
                return
            self._in_flight.add(key)
            future = self._executor.submit(self._populate_safe, key, search_key)
            self._futures.add(future)
        # Outside the lock: a future that is already done runs the callback here
        future.add_done_callback(self._forget)
        log.debug(f"Lookup requested: {key} search_key={search_key!r}")

    # -- Store API --

    def put(
        self,
        file_identity: FileRef,
        result: EnrichmentResult,
        search_key: str = "",
    ) -> None:
        """Insert or replace the cached entry for file_identity."""
        conn = self._get_conn()
        conn.execute(
            "INSERT OR REPLACE INTO metadata "
            "(file_identity, search_key, title, year, episode_name, fetched_at) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (
                str(file_identity),
                search_key,
                result.title,
                result.year,
                result.episode_name,
                _utcnow(),
            ),
        )
        conn.commit()

    def is_pending(self, file_identity: FileRef) -> bool:
        with self._lock:
            return str(file_identity) in self._in_flight

    def wait(self, timeout: float | None = None) -> int:
        """Block until all requested lookups finish.

        Returns how many lookups finished since the previous wait().
        """
        with self._lock:
            futures = list(self._futures)
        if futures:
            wait(futures, timeout=timeout)
        with self._lock:
            self._futures = {f for f in self._futures if not f.done()}
            finished, self._finished = self._finished, 0
        return finished

    def close(self) -> None:
        """Finish pending lookups and close the current thread's connection."""
        with self._lock:
            self._closed = True
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            conn.close()
            self._local.conn = None

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def _populate_safe(self, key: str, search_key: str) -> bool:
        """Run the fetcher and store its result.

        Worker-side failures are logged, never raised into the caller of
        request(). Returns True if an entry was stored.
        """
        try:
            result = self.fetcher(search_key)
            if result is None:
                log.info(f"No metadata found for {search_key!r}")
                return False
            self.put(key, result, search_key)
            log.debug(f"Cached {result.title!r} for {key}")
            return True
        except Exception as e:
            log.error(f"Lookup failed for {key}: {e}")
            return False
        finally:
            with self._lock:
                self._in_flight.discard(key)
                self._finished += 1
            conn = getattr(self._local, "conn", None)
            if conn is not None:
                conn.close()
                self._local.conn = None
