"""Sale domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PaymentMode(str, Enum):
    POS = "POS"
    TRANSFER = "transfer"
    CASH = "cash"


@dataclass
class Sale:
    product_id: str
    quantity: int
    price: float
    sales_person_id: str
    payment_mode: PaymentMode = PaymentMode.CASH
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    date: str = field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    )

    @property
    def total(self) -> float:
        return round(self.quantity * self.price, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "total": self.total,
            "date": self.date,
            "salesPersonId": self.sales_person_id,
            "paymentMode": self.payment_mode.value,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Sale":
        return cls(
            id=row["id"],
            product_id=row["productId"],
            quantity=int(row["quantity"]),
            price=float(row["price"]),
            date=row["date"],
            sales_person_id=row["salesPersonId"],
            payment_mode=PaymentMode(row["paymentMode"]),
        )
