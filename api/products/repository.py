"""
Product persistence (raw SQL over SQLite).

`ProductStore` owns the `produtos` table: it creates it, applies the
`updated_at` migration, seeds an empty table and serves CRUD reads/writes.
Ids come from SQLite AUTOINCREMENT, never from application code.

Values passed to `create_product` / `update_product` are expected to be
validated already (see `service.py`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from core.db import Database
from core.errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

# Column names follow the existing on-disk layout of produtos.db.
_SELECT_COLUMNS = """
    id,
    nome AS name,
    preco AS price,
    COALESCE(descricao, '') AS description,
    updated_at
"""

SEED_PRODUCTS: tuple[tuple[str, float, str], ...] = (
    ("Camiseta Tech", 59.9, "Camiseta 100% algodão premium"),
    ("Mouse Gamer X", 129.0, "RGB, 6 botões programáveis"),
    ("Fone Bluetooth", 199.9, "Cancelamento de ruído e estojo de carga"),
)


# SQLite INTEGER PRIMARY KEY range.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _storable_id(product_id: int) -> bool:
    return _MIN_ID <= product_id <= _MAX_ID


@dataclass(frozen=True)
class InitReport:
    migrated: bool = False
    backfilled: int = 0
    seeded: int = 0


class ProductStore:
    def __init__(
        self,
        database: Database,
        *,
        clock: Callable[[], str] = utc_now_iso,
        seed_on_empty: bool = True,
    ) -> None:
        self.db = database
        self._now = clock
        self._seed_on_empty = seed_on_empty

    # ── Startup ──────────────────────────────────────────────────────────

    async def initialize(self) -> InitReport:
        """
        Prepare the table before serving requests.

        Steps, in order:
        1. create the table (failure propagates, the app must not start)
        2. add `updated_at` when missing, then back-fill null/empty values
           (logged, non-fatal)
        3. seed an empty table (logged, non-fatal)

        The back-fill runs on every start, so rows left unstamped by an
        interrupted migration are picked up next time. Running it again on a
        prepared store changes nothing.
        """
        await self._create_table()

        migrated = False
        backfilled = 0
        try:
            migrated = await self._migrate_updated_at()
            backfilled = await self._backfill_updated_at()
        except StorageError:
            logger.exception("products_migration_failed db=%s", self.db.path)

        seeded = 0
        if self._seed_on_empty:
            try:
                seeded = await self._seed_if_empty()
            except StorageError:
                logger.exception("products_seed_failed db=%s", self.db.path)

        return InitReport(migrated=migrated, backfilled=backfilled, seeded=seeded)

    async def _create_table(self) -> None:
        await self.db.execute(
            """
            CREATE TABLE IF NOT EXISTS produtos (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                nome TEXT NOT NULL,
                preco REAL NOT NULL,
                descricao TEXT,
                updated_at TEXT
            )
            """
        )

    async def column_names(self) -> list[str]:
        rows = await self.db.fetch_all("PRAGMA table_info(produtos)")
        return [str(r["name"]) for r in rows]

    async def _migrate_updated_at(self) -> bool:
        if "updated_at" in await self.column_names():
            return False

        await self.db.execute("ALTER TABLE produtos ADD COLUMN updated_at TEXT")
        logger.info("products_migration_done column=updated_at")
        return True

    async def _backfill_updated_at(self) -> int:
        affected = await self.db.execute(
            """
            UPDATE produtos
            SET updated_at = ?
            WHERE updated_at IS NULL OR updated_at = ''
            """,
            self._now(),
        )
        if affected:
            logger.info("products_backfilled column=updated_at count=%s", affected)
        return affected

    async def count(self) -> int:
        row = await self.db.fetch_one("SELECT COUNT(*) AS count FROM produtos")
        return int(row["count"]) if row is not None else 0

    async def _seed_if_empty(self) -> int:
        if await self.count() > 0:
            return 0

        now = self._now()
        await self.db.execute_many(
            "INSERT INTO produtos (nome, preco, descricao, updated_at) VALUES (?, ?, ?, ?)",
            [(name, price, description, now) for (name, price, description) in SEED_PRODUCTS],
        )
        logger.info("products_seeded count=%s", len(SEED_PRODUCTS))
        return len(SEED_PRODUCTS)

    # ── Reads ────────────────────────────────────────────────────────────

    async def list_products(self) -> list[dict[str, Any]]:
        return await self.db.fetch_all(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM produtos
            ORDER BY id DESC
            """
        )

    async def find_product(self, product_id: int) -> dict[str, Any] | None:
        if not _storable_id(product_id):
            return None
        return await self.db.fetch_one(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM produtos
            WHERE id = ?
            """,
            product_id,
        )

    async def get_product(self, product_id: int) -> dict[str, Any]:
        row = await self.find_product(product_id)
        if row is None:
            raise NotFoundError("Product not found.")
        return row

    # ── Writes ───────────────────────────────────────────────────────────

    async def _reread_or(self, product_id: int, fallback: dict[str, Any]) -> dict[str, Any]:
        # The write is already committed; a failed read-back must not fail the request.
        try:
            row = await self.find_product(product_id)
        except StorageError:
            logger.warning("products_reread_failed id=%s", product_id, exc_info=True)
            return fallback
        return row if row is not None else fallback

    async def create_product(self, *, name: str, price: float, description: str = "") -> dict[str, Any]:
        now = self._now()
        product_id = await self.db.insert(
            "INSERT INTO produtos (nome, preco, descricao, updated_at) VALUES (?, ?, ?, ?)",
            name,
            price,
            description,
            now,
        )
        logger.info("product_created id=%s", product_id)
        return await self._reread_or(
            product_id,
            {
                "id": product_id,
                "name": name,
                "price": price,
                "description": description,
                "updated_at": now,
            },
        )

    async def update_product(
        self,
        product_id: int,
        *,
        name: str,
        price: float,
        description: str,
    ) -> dict[str, Any]:
        if not _storable_id(product_id):
            raise NotFoundError("Product not found.")
        now = self._now()
        affected = await self.db.execute(
            """
            UPDATE produtos
            SET nome = ?, preco = ?, descricao = ?, updated_at = ?
            WHERE id = ?
            """,
            name,
            price,
            description,
            now,
            product_id,
        )
        if affected == 0:
            raise NotFoundError("Product not found.")
        logger.info("product_updated id=%s", product_id)
        return await self._reread_or(
            product_id,
            {
                "id": product_id,
                "name": name,
                "price": price,
                "description": description,
                "updated_at": now,
            },
        )

    async def delete_product(self, product_id: int) -> dict[str, Any]:
        """
        Delete a product and return the row as it was before deletion.
        """
        snapshot = await self.get_product(product_id)
        await self.db.execute("DELETE FROM produtos WHERE id = ?", product_id)
        logger.info("product_deleted id=%s", product_id)
        return snapshot
