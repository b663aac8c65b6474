"""Repository for the ``products`` table — CRUD plus stock bookkeeping."""

from __future__ import annotations

from typing import Any, Optional

from inventory.db.database import Database, TransactionScope
from inventory.models.product import Product

# Model attribute -> column
_UPDATABLE = {
    "name": "name",
    "sku": "sku",
    "quantity": "quantity",
    "reorder_level": "reorderLevel",
    "price": "price",
    "cost": "cost",
    "category": "category",
}


class ProductRepository:
    """Single-Responsibility repository for product persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    async def create(self, product: Product) -> Product:
        """Insert a new product. Raises on duplicate id or SKU."""
        await self._db.execute(
            """INSERT INTO products
               (id, name, sku, quantity, reorderLevel, price, cost, category)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                product.id, product.name, product.sku, product.quantity,
                product.reorder_level, product.price, product.cost, product.category,
            ),
        )
        return product

    # -- Read ------------------------------------------------------------------

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        row = await self._db.fetchone("SELECT * FROM products WHERE id = ?", (product_id,))
        return Product.from_row(row) if row else None

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        row = await self._db.fetchone("SELECT * FROM products WHERE sku = ?", (sku,))
        return Product.from_row(row) if row else None

    async def list_all(self, category: Optional[str] = None) -> list[Product]:
        if category:
            rows = await self._db.fetchall(
                "SELECT * FROM products WHERE category = ? ORDER BY sku", (category,)
            )
        else:
            rows = await self._db.fetchall("SELECT * FROM products ORDER BY sku")
        return [Product.from_row(r) for r in rows]

    async def list_low_stock(self) -> list[Product]:
        """Products at or below their reorder level."""
        rows = await self._db.fetchall(
            "SELECT * FROM products WHERE quantity <= reorderLevel ORDER BY quantity"
        )
        return [Product.from_row(r) for r in rows]

    # -- Update ----------------------------------------------------------------

    async def update(self, product_id: str, **fields: Any) -> Optional[Product]:
        """
        Update the given model attributes on a product row.  Unknown keys are
        ignored; returns the refreshed product, or None if it does not exist.
        """
        filtered = {_UPDATABLE[k]: v for k, v in fields.items() if k in _UPDATABLE}
        if not filtered:
            return await self.get_by_id(product_id)

        set_parts = [f"{column} = ?" for column in filtered]
        values = list(filtered.values())
        values.append(product_id)
        await self._db.execute(
            f"UPDATE products SET {', '.join(set_parts)} WHERE id = ?", values
        )
        return await self.get_by_id(product_id)

    async def adjust_quantity(self, product_id: str, delta: int) -> Optional[Product]:
        """Add ``delta`` (may be negative) to stock; stock never goes below zero."""

        async def body(tx: TransactionScope) -> Optional[Product]:
            row = await tx.fetchone("SELECT quantity FROM products WHERE id = ?", (product_id,))
            if row is None:
                return None
            new_quantity = row["quantity"] + delta
            if new_quantity < 0:
                raise ValueError(
                    f"Stock for {product_id} cannot go below zero "
                    f"(have {row['quantity']}, change {delta})"
                )
            await tx.execute(
                "UPDATE products SET quantity = ? WHERE id = ?", (new_quantity, product_id)
            )
            return Product.from_row(
                await tx.fetchone("SELECT * FROM products WHERE id = ?", (product_id,))
            )

        return await self._db.transaction(body)

    # -- Delete ----------------------------------------------------------------

    async def delete(self, product_id: str) -> bool:
        """Delete a product. Raises IntegrityError if sales still reference it."""
        existing = await self.get_by_id(product_id)
        if existing is None:
            return False
        await self._db.execute("DELETE FROM products WHERE id = ?", (product_id,))
        return True
