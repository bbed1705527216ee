"""SQLite-backed key-value store with per-record optimistic concurrency.

Every record lives in a namespace (``projects`` or ``workspaces``) under a
string key, holds a JSON document and carries a version counter. Writers
that must not clobber a concurrent update go through ``update``, which
re-reads and retries until its conditional write wins.

Several CLI processes may share the same database file, so each statement
runs in autocommit mode and the version check happens inside the UPDATE's
WHERE clause.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tstack_cli.errors import NotFound

PROJECTS = "projects"
WORKSPACES = "workspaces"

_MAX_UPDATE_ATTEMPTS = 50

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    namespace TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    version INTEGER NOT NULL,
    PRIMARY KEY (namespace, key)
)
"""


@dataclass(frozen=True)
class StoreEntry:
    """A stored document together with the version it was read at."""

    key: str
    value: dict[str, Any]
    version: int


class MetadataStore:
    """Ordered key-value mapping persisted in a single SQLite file."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path), timeout=10, isolation_level=None)
        self._conn.execute(_SCHEMA)

    def close(self) -> None:
        self._conn.close()

    def get(self, namespace: str, key: str) -> StoreEntry | None:
        row = self._conn.execute(
            "SELECT value, version FROM entries WHERE namespace = ? AND key = ?",
            (namespace, key),
        ).fetchone()
        if row is None:
            return None
        return StoreEntry(key=key, value=json.loads(row[0]), version=row[1])

    def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        """Unconditional write (insert or overwrite)."""
        self._conn.execute(
            """
            INSERT INTO entries (namespace, key, value, version)
            VALUES (?, ?, ?, 1)
            ON CONFLICT (namespace, key)
            DO UPDATE SET value = excluded.value, version = entries.version + 1
            """,
            (namespace, key, json.dumps(value)),
        )

    def compare_and_set(
        self,
        namespace: str,
        key: str,
        value: dict[str, Any],
        expected_version: int | None,
    ) -> bool:
        """Write only if the record is still at ``expected_version``.

        ``expected_version=None`` means the key must not exist yet.

        Returns:
            True if the write happened, False if another writer got there first.
        """
        payload = json.dumps(value)
        if expected_version is None:
            cursor = self._conn.execute(
                "INSERT OR IGNORE INTO entries (namespace, key, value, version) "
                "VALUES (?, ?, ?, 1)",
                (namespace, key, payload),
            )
        else:
            cursor = self._conn.execute(
                "UPDATE entries SET value = ?, version = version + 1 "
                "WHERE namespace = ? AND key = ? AND version = ?",
                (payload, namespace, key, expected_version),
            )
        return cursor.rowcount == 1

    def update(
        self,
        namespace: str,
        key: str,
        mutate: Callable[[dict[str, Any]], dict[str, Any]],
    ) -> dict[str, Any]:
        """Read-modify-write ``key`` with retry on a lost race.

        Raises:
            NotFound: If the key does not exist.
            RuntimeError: If the write keeps losing to concurrent writers.
        """
        for _attempt in range(_MAX_UPDATE_ATTEMPTS):
            entry = self.get(namespace, key)
            if entry is None:
                raise NotFound(key)
            new_value = mutate(dict(entry.value))
            if self.compare_and_set(namespace, key, new_value, entry.version):
                return new_value
        raise RuntimeError(
            f"Could not update {namespace}/{key}: "
            f"{_MAX_UPDATE_ATTEMPTS} concurrent modifications in a row"
        )

    def delete(self, namespace: str, key: str) -> None:
        self._conn.execute(
            "DELETE FROM entries WHERE namespace = ? AND key = ?",
            (namespace, key),
        )

    def list(self, namespace: str, prefix: str = "") -> list[StoreEntry]:
        """All entries in ``namespace`` whose key starts with ``prefix``, by key."""
        rows = self._conn.execute(
            "SELECT key, value, version FROM entries "
            "WHERE namespace = ? AND substr(key, 1, ?) = ? ORDER BY key",
            (namespace, len(prefix), prefix),
        ).fetchall()
        return [
            StoreEntry(key=row[0], value=json.loads(row[1]), version=row[2])
            for row in rows
        ]


@contextmanager
def open_store(db_path: Path) -> Iterator[MetadataStore]:
    """Open the store for one command invocation and always close it."""
    store = MetadataStore(db_path)
    try:
        yield store
    finally:
        store.close()
