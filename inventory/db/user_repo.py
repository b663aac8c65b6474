"""Repository for the ``users`` table."""

from __future__ import annotations

import asyncio
from typing import Optional

from inventory.db.database import Database
from inventory.models.user import User, UserRole
from inventory.security import hash_password, verify_password


class UserRepository:
    """Single-Responsibility repository for user persistence."""

    def __init__(self, db: Database):
        self._db = db

    # -- Create ----------------------------------------------------------------

    async def create(self, user: User, password: str) -> User:
        """Hash ``password`` and insert the user. Raises on duplicate email."""
        user.password = await asyncio.to_thread(hash_password, password)
        await self._db.execute(
            "INSERT INTO users (id, email, password, name, role) VALUES (?, ?, ?, ?, ?)",
            (user.id, user.email, user.password, user.name, user.role.value),
        )
        return user

    # -- Read ------------------------------------------------------------------

    async def get_by_id(self, user_id: str) -> Optional[User]:
        row = await self._db.fetchone("SELECT * FROM users WHERE id = ?", (user_id,))
        return User.from_row(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        row = await self._db.fetchone("SELECT * FROM users WHERE email = ?", (email,))
        return User.from_row(row) if row else None

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when ``password`` matches the stored hash, else None."""
        user = await self.get_by_email(email)
        if user is None:
            return None
        ok = await asyncio.to_thread(verify_password, password, user.password)
        return user if ok else None

    async def list_all(self, role: Optional[UserRole] = None) -> list[User]:
        if role:
            rows = await self._db.fetchall(
                "SELECT * FROM users WHERE role = ? ORDER BY name", (role.value,)
            )
        else:
            rows = await self._db.fetchall("SELECT * FROM users ORDER BY name")
        return [User.from_row(r) for r in rows]
