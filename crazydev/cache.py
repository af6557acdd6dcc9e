"""Two-level cache (memory and SQLite) for analysis results."""

from __future__ import annotations

import json
import sqlite3
import sys
import threading
import time
from datetime import datetime, timedelta
from pathlib import Path

from crazydev.models import AnalysisResult

DEFAULT_MAX_CACHE_AGE = timedelta(hours=24)
CACHE_DB_NAME = "context.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS analysis_cache (
    path TEXT PRIMARY KEY,
    result TEXT NOT NULL,
    timestamp INTEGER NOT NULL
)
"""


def _warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def default_cache_dir() -> Path:
    """Return the directory where the cache database lives by default."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        _warn(f"Could not get user home directory: {exc}")
        home = Path(".")
    return home / ".crazy-dev" / "cache"


def _age(moment: datetime) -> timedelta:
    return datetime.now(moment.tzinfo) - moment


class CacheManager:
    """Caches analysis results in memory, backed by an SQLite table when available."""

    def __init__(self, cache_dir=None, max_cache_age: timedelta = DEFAULT_MAX_CACHE_AGE):
        directory = Path(cache_dir) if cache_dir is not None else default_cache_dir()
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            _warn(f"Could not create cache directory: {exc}")
        self.cache_path = directory / CACHE_DB_NAME
        self.max_cache_age = max_cache_age
        self._lock = threading.RLock()
        self._memory: dict[str, AnalysisResult] = {}
        self._db = self._open_db()

    def _open_db(self) -> sqlite3.Connection | None:
        try:
            db = sqlite3.connect(str(self.cache_path), check_same_thread=False)
        except sqlite3.Error as exc:
            _warn(f"Could not open cache database: {exc}")
            return None
        try:
            with db:
                db.execute(_SCHEMA)
        except sqlite3.Error as exc:
            _warn(f"Could not create cache table: {exc}")
            db.close()
            return None
        return db

    def store_analysis(self, path, result: AnalysisResult) -> None:
        """Store ``result`` under ``path`` in memory and in the database."""
        key = str(path)
        with self._lock:
            self._memory[key] = result
            if self._db is None:
                return
            payload = json.dumps(result.to_dict())
            with self._db:
                self._db.execute(
                    "INSERT OR REPLACE INTO analysis_cache (path, result, timestamp) "
                    "VALUES (?, ?, ?)",
                    (key, payload, int(time.time())),
                )

    def get_analysis(self, path) -> AnalysisResult | None:
        """Return a cached result that is still fresh, or None."""
        key = str(path)
        with self._lock:
            cached = self._memory.get(key)
            if cached is not None:
                if _age(cached.analyzed_at) <= self.max_cache_age:
                    return cached
                del self._memory[key]

            if self._db is None:
                return None

            try:
                row = self._db.execute(
                    "SELECT result, timestamp FROM analysis_cache WHERE path = ?", (key,)
                ).fetchone()
            except sqlite3.Error as exc:
                _warn(f"Error querying cache: {exc}")
                return None
            if row is None:
                return None

            payload, stamp = row
            if time.time() - stamp > self.max_cache_age.total_seconds():
                self.invalidate_analysis(key)
                return None

            try:
                result = AnalysisResult.from_dict(json.loads(payload))
            except (ValueError, TypeError, AttributeError) as exc:
                _warn(f"Failed to deserialize cached result: {exc}")
                return None

            self._memory[key] = result
            return result

    def invalidate_analysis(self, path) -> None:
        """Remove any cached result for ``path``."""
        key = str(path)
        with self._lock:
            self._memory.pop(key, None)
            if self._db is None:
                return
            with self._db:
                self._db.execute("DELETE FROM analysis_cache WHERE path = ?", (key,))

    def cleanup_cache(self, max_age: timedelta) -> None:
        """Delete database entries stored more than ``max_age`` ago."""
        with self._lock:
            if self._db is None:
                return
            cutoff = int(time.time() - max_age.total_seconds())
            with self._db:
                self._db.execute("DELETE FROM analysis_cache WHERE timestamp < ?", (cutoff,))

    def close(self) -> None:
        """Close the database connection, if any."""
        with self._lock:
            if self._db is not None:
                self._db.close()
                self._db = None

    def __enter__(self) -> CacheManager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()