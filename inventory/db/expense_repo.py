"""Repository for the ``expenses`` table."""

from __future__ import annotations

from typing import Optional

from inventory.db.database import Database
from inventory.models.expense import Expense


class ExpenseRepository:
    """Single-Responsibility repository for expense persistence."""

    def __init__(self, db: Database):
        self._db = db

    async def create(self, expense: Expense) -> Expense:
        await self._db.execute(
            """INSERT INTO expenses (id, description, amount, category, date, createdBy)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                expense.id, expense.description, expense.amount,
                expense.category, expense.date, expense.created_by,
            ),
        )
        return expense

    async def get_by_id(self, expense_id: str) -> Optional[Expense]:
        row = await self._db.fetchone("SELECT * FROM expenses WHERE id = ?", (expense_id,))
        return Expense.from_row(row) if row else None

    async def list_all(self) -> list[Expense]:
        rows = await self._db.fetchall("SELECT * FROM expenses ORDER BY date DESC")
        return [Expense.from_row(r) for r in rows]

    async def list_by_category(self, category: str) -> list[Expense]:
        rows = await self._db.fetchall(
            "SELECT * FROM expenses WHERE category = ? ORDER BY date DESC", (category,)
        )
        return [Expense.from_row(r) for r in rows]

    async def total_amount(self, category: Optional[str] = None) -> float:
        if category:
            row = await self._db.fetchone(
                "SELECT COALESCE(SUM(amount), 0) AS total FROM expenses WHERE category = ?",
                (category,),
            )
        else:
            row = await self._db.fetchone("SELECT COALESCE(SUM(amount), 0) AS total FROM expenses")
        return float(row["total"]) if row else 0.0
