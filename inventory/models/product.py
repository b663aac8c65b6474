"""Product domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Product:
    name: str
    sku: str
    quantity: int
    reorder_level: int
    price: float
    cost: float
    category: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def needs_reorder(self) -> bool:
        return self.quantity <= self.reorder_level

    @property
    def margin(self) -> float:
        return self.price - self.cost

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "quantity": self.quantity,
            "reorderLevel": self.reorder_level,
            "price": self.price,
            "cost": self.cost,
            "category": self.category,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Product":
        return cls(
            id=row["id"],
            name=row["name"],
            sku=row["sku"],
            quantity=int(row["quantity"]),
            reorder_level=int(row["reorderLevel"]),
            price=float(row["price"]),
            cost=float(row["cost"]),
            category=row["category"],
        )
