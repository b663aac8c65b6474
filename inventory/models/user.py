"""User domain model."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    SALESGIRL = "salesgirl"


@dataclass
class User:
    """An application user. ``password`` holds the bcrypt hash, never plain text."""

    email: str
    name: str
    password: str = ""
    role: UserRole = UserRole.SALESGIRL
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self, include_password: bool = False) -> dict[str, Any]:
        data = {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
        }
        if include_password:
            data["password"] = self.password
        return data

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        return cls(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password=row.get("password", ""),
            role=UserRole(row["role"]),
        )
