"""Repository for the ``sales`` table.

Recording a sale touches two tables (the sale row and the product's stock),
so it always runs in a single transaction.
"""

from __future__ import annotations

from typing import Optional

from inventory.db.database import Database, TransactionScope
from inventory.models.sale import Sale


class InsufficientStockError(Exception):
    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )


class SaleRepository:
    """Single-Responsibility repository for sale persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    async def record(self, sale: Sale) -> Sale:
        """Insert the sale and decrement stock atomically.

        Raises ``LookupError`` for an unknown product and
        ``InsufficientStockError`` when stock is short; nothing is written in
        either case.
        """

        async def body(tx: TransactionScope) -> Sale:
            product = await tx.fetchone(
                "SELECT id, quantity FROM products WHERE id = ?", (sale.product_id,)
            )
            if product is None:
                raise LookupError(f"Unknown product: {sale.product_id}")
            if product["quantity"] < sale.quantity:
                raise InsufficientStockError(sale.product_id, sale.quantity, product["quantity"])

            await tx.execute(
                """INSERT INTO sales
                   (id, productId, quantity, price, total, date, salesPersonId, paymentMode)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    sale.id, sale.product_id, sale.quantity, sale.price, sale.total,
                    sale.date, sale.sales_person_id, sale.payment_mode.value,
                ),
            )
            await tx.execute(
                "UPDATE products SET quantity = quantity - ? WHERE id = ?",
                (sale.quantity, sale.product_id),
            )
            return sale

        return await self._db.transaction(body)

    # -- Read ------------------------------------------------------------------

    async def get_by_id(self, sale_id: str) -> Optional[Sale]:
        row = await self._db.fetchone("SELECT * FROM sales WHERE id = ?", (sale_id,))
        return Sale.from_row(row) if row else None

    async def list_all(self, limit: int = 100) -> list[Sale]:
        rows = await self._db.fetchall(
            "SELECT * FROM sales ORDER BY date DESC LIMIT ?", (limit,)
        )
        return [Sale.from_row(r) for r in rows]

    async def list_by_salesperson(self, user_id: str) -> list[Sale]:
        rows = await self._db.fetchall(
            "SELECT * FROM sales WHERE salesPersonId = ? ORDER BY date DESC", (user_id,)
        )
        return [Sale.from_row(r) for r in rows]

    async def total_revenue(self, start: Optional[str] = None, end: Optional[str] = None) -> float:
        """Sum of sale totals, optionally within ISO date bounds (inclusive)."""
        clauses: list[str] = []
        params: list[str] = []
        if start:
            clauses.append("date >= ?")
            params.append(start)
        if end:
            clauses.append("date <= ?")
            params.append(end)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        row = await self._db.fetchone(
            f"SELECT COALESCE(SUM(total), 0) AS revenue FROM sales{where}", params
        )
        return float(row["revenue"]) if row else 0.0
