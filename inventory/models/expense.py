"""Expense domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class Expense:
    description: str
    amount: float
    category: str
    created_by: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    date: str = field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
            "createdBy": self.created_by,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Expense":
        return cls(
            id=row["id"],
            description=row["description"],
            amount=float(row["amount"]),
            category=row["category"],
            date=row["date"],
            created_by=row["createdBy"],
        )
