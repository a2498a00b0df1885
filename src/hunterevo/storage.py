"""SQLite-backed key-value store for JSON-encoded app state."""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

SCHEMA_VERSION = 1

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueStore:
    """String-keyed storage with get/set/remove/clear semantics."""

    def __init__(self, db_path: Path | str) -> None:
        """Initialize database and schema."""
        if isinstance(db_path, Path):
            db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(db_path)
        else:
            target = db_path
        self._conn = sqlite3.connect(target)
        self._conn.row_factory = sqlite3.Row
        self._apply_migrations()

    def _apply_migrations(self) -> None:
        """Apply forward-only schema migrations to latest version."""
        current = int(self._conn.execute("PRAGMA user_version").fetchone()[0])
        if current > SCHEMA_VERSION:
            raise RuntimeError(f"Database schema version {current} is newer than supported {SCHEMA_VERSION}.")

        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_migrations (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
                """)

        for version in range(current + 1, SCHEMA_VERSION + 1):
            if version == 1:
                self._migrate_to_v1()
            with self._conn:
                self._conn.execute(f"PRAGMA user_version = {version}")
                self._conn.execute(
                    "INSERT OR REPLACE INTO schema_migrations (version, applied_at) VALUES (?, ?)",
                    (version, datetime.now(UTC).isoformat()),
                )

    def _migrate_to_v1(self) -> None:
        """Create the key-value table."""
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """)

    def get(self, key: str) -> str | None:
        """Return the stored string for a key, or None."""
        row = self._conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return str(row["value"])

    def set(self, key: str, value: str) -> None:
        """Store a string value, replacing any previous value."""
        with self._conn:
            self._conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(UTC).isoformat()),
            )

    def remove(self, keys: str | Iterable[str]) -> None:
        """Remove one key or several keys; missing keys are ignored."""
        targets = [keys] if isinstance(keys, str) else list(keys)
        if not targets:
            return
        placeholders = ", ".join("?" for _ in targets)
        with self._conn:
            self._conn.execute(f"DELETE FROM kv_store WHERE key IN ({placeholders})", tuple(targets))

    def clear(self) -> None:
        """Remove every key."""
        with self._conn:
            self._conn.execute("DELETE FROM kv_store")

    def keys(self) -> list[str]:
        """Return stored keys ordered by name."""
        rows = self._conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [str(row["key"]) for row in rows]

    def load_json(self, key: str, default: Callable[[], T], parse: Callable[[Any], T] | None = None) -> T:
        """Decode a JSON payload, falling back to `default()` when it is missing or malformed.

        `parse` converts the decoded JSON into the caller's type; any KeyError,
        TypeError or ValueError it raises also triggers the fallback.
        """
        raw = self.get(key)
        if raw is None:
            return default()
        try:
            decoded = json.loads(raw)
            return parse(decoded) if parse is not None else decoded
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Stored %r is malformed, using default: %s", key, exc)
            return default()

    def save_json(self, key: str, value: Any) -> None:
        """Encode a JSON-compatible value and store it."""
        self.set(key, json.dumps(value))

    def close(self) -> None:
        """Close db connection."""
        self._conn.close()

    def __del__(self) -> None:  # pragma: no cover
        """Best-effort connection cleanup."""
        try:
            self.close()
        except Exception:
            pass
