"""
Async database access helpers (raw SQL) over a single SQLite file.

The app lifespan builds one `Database` per process and hands it to the
feature stores (see `api/main.py`). Every call opens its own connection and
runs on a worker thread, so the event loop never blocks on disk I/O.

SQL parameter style:
- sqlite3 uses positional placeholders: ?, ?, ...
"""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Any

from .errors import StorageError


def _row_to_dict(row: sqlite3.Row) -> dict[str, Any]:
    return dict(row)


class Database:
    def __init__(self, path: str | Path, *, timeout_s: float = 5.0) -> None:
        self.path = Path(path)
        self.timeout_s = timeout_s

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.path), timeout=self.timeout_s)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def ensure_parent_dir(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    async def _run(self, fn, sql: str, params: Any) -> Any:
        def call() -> Any:
            conn = self._connect()
            try:
                result = fn(conn, sql, params)
                conn.commit()
                return result
            finally:
                conn.close()

        # sqlite3 raises OverflowError when binding integers outside 64 bits.
        try:
            return await asyncio.to_thread(call)
        except (sqlite3.Error, OverflowError) as e:
            raise StorageError(f"SQLite error: {e}") from e

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """

        def q(conn: sqlite3.Connection, sql: str, args: tuple[Any, ...]) -> dict[str, Any] | None:
            row = conn.execute(sql, args).fetchone()
            return _row_to_dict(row) if row is not None else None

        return await self._run(q, sql, args)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """

        def q(conn: sqlite3.Connection, sql: str, args: tuple[Any, ...]) -> list[dict[str, Any]]:
            return [_row_to_dict(r) for r in conn.execute(sql, args).fetchall()]

        return await self._run(q, sql, args)

    async def execute(self, sql: str, *args: Any) -> int:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL).

        Returns the affected row count.
        """

        def q(conn: sqlite3.Connection, sql: str, args: tuple[Any, ...]) -> int:
            return conn.execute(sql, args).rowcount

        return await self._run(q, sql, args)

    async def insert(self, sql: str, *args: Any) -> int:
        """
        Run an INSERT and return the rowid assigned by SQLite.
        """

        def q(conn: sqlite3.Connection, sql: str, args: tuple[Any, ...]) -> int:
            return int(conn.execute(sql, args).lastrowid)

        return await self._run(q, sql, args)

    async def execute_many(self, sql: str, rows: list[tuple[Any, ...]]) -> None:
        """
        Run one statement for each parameter tuple inside a single transaction.
        """

        def q(conn: sqlite3.Connection, sql: str, rows: list[tuple[Any, ...]]) -> None:
            conn.executemany(sql, rows)

        await self._run(q, sql, rows)
