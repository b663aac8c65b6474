"""Schema bootstrap: create tables and insert baseline rows, idempotently.

``bootstrap_schema`` is safe to re-run against an already-provisioned
store: tables use ``CREATE TABLE IF NOT EXISTS`` and seed rows use
``INSERT OR IGNORE`` keyed on fixed ids / SKUs, so reruns never duplicate
or overwrite existing rows.

The helpers accept anything with awaitable ``fetchone`` and ``execute``:
the ``TransactionScope`` that wraps startup, or a ``Database`` afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, Sequence

from inventory.config import get_seed_config
from inventory.db.schema import INDEXES_DDL, SCHEMA_DDL
from inventory.security import hash_password

logger = logging.getLogger(__name__)


class SupportsQueries(Protocol):
    async def fetchone(self, sql: str, params: Sequence[Any] = ...) -> Optional[dict[str, Any]]: ...

    async def execute(self, sql: str, params: Sequence[Any] = ...) -> None: ...


ADMIN_USER = {
    "id": "admin1",
    "email": "admin@inventory.com",
    "name": "Admin User",
    "role": "admin",
}

SEED_PRODUCTS: tuple[tuple[Any, ...], ...] = (
    # id, name, sku, quantity, reorderLevel, price, cost, category
    ("prod1", "Sample Product 1", "SKU001", 100, 10, 50.00, 30.00, "Electronics"),
    ("prod2", "Sample Product 2", "SKU002", 200, 20, 25.00, 15.00, "Clothing"),
    ("prod3", "Sample Product 3", "SKU003", 150, 15, 75.00, 45.00, "Home Goods"),
)

_INSERT_USER = """INSERT OR IGNORE INTO users (id, email, password, name, role)
                  VALUES (?, ?, ?, ?, ?)"""

_INSERT_PRODUCT = """INSERT OR IGNORE INTO products
                     (id, name, sku, quantity, reorderLevel, price, cost, category)
                     VALUES (?, ?, ?, ?, ?, ?, ?, ?)"""


async def create_tables(conn: SupportsQueries) -> None:
    for name, ddl in SCHEMA_DDL:
        await conn.execute(ddl, ())
        logger.debug("Ensured table %s", name)
    for ddl in INDEXES_DDL:
        await conn.execute(ddl, ())


async def seed_admin(conn: SupportsQueries, password: Optional[str] = None) -> None:
    """Insert the default administrator unless a row with its id or email exists."""
    existing = await conn.fetchone(
        "SELECT 1 FROM users WHERE id = ? OR email = ?",
        (ADMIN_USER["id"], ADMIN_USER["email"]),
    )
    if existing:
        logger.debug("Administrator already present; skipping seed")
        return
    cfg = get_seed_config()
    # bcrypt is CPU-bound; keep it off the event loop
    password_hash = await asyncio.to_thread(
        hash_password, password or cfg.admin_password, cfg.bcrypt_rounds
    )
    await conn.execute(
        _INSERT_USER,
        (
            ADMIN_USER["id"], ADMIN_USER["email"], password_hash,
            ADMIN_USER["name"], ADMIN_USER["role"],
        ),
    )


async def seed_products(conn: SupportsQueries) -> None:
    for row in SEED_PRODUCTS:
        await conn.execute(_INSERT_PRODUCT, row)


async def bootstrap_schema(conn: SupportsQueries) -> None:
    """Create all tables, then seed users before anything that references them."""
    await create_tables(conn)
    await seed_admin(conn)
    await seed_products(conn)
    logger.info("Database schema and seed data ready")
