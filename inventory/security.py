"""Password hashing (bcrypt)."""

from __future__ import annotations

from typing import Optional

import bcrypt

from inventory.config import get_seed_config


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    if rounds is None:
        rounds = get_seed_config().bcrypt_rounds
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False
