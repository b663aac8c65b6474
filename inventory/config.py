"""
Central configuration loader.
Reads from environment variables (via .env); NEVER prints secret values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Load .env from repo root (if present)
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(_REPO_ROOT / ".env")

MEMORY_TARGET = ":memory:"


def _get(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    val = os.getenv(key, default)
    if required and not val:
        raise EnvironmentError(f"Missing required environment variable: {key}")
    return val


# ---------------------------------------------------------------------------
# Database target
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class DatabaseConfig:
    target: str
    in_memory: bool


def get_database_config() -> DatabaseConfig:
    """Production deployments run on an in-memory store; everything else on a file."""
    env = (_get("INVENTORY_ENV", default="development") or "").lower()
    if env == "production":
        return DatabaseConfig(target=MEMORY_TARGET, in_memory=True)
    override = _get("INVENTORY_DB_PATH")
    if override == MEMORY_TARGET:
        return DatabaseConfig(target=MEMORY_TARGET, in_memory=True)
    path = Path(override) if override else get_data_dir() / "inventory.db"
    return DatabaseConfig(target=str(path), in_memory=False)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SeedConfig:
    admin_password: str
    bcrypt_rounds: int


def get_seed_config() -> SeedConfig:
    return SeedConfig(
        admin_password=_get("INVENTORY_ADMIN_PASSWORD", default="admin123"),  # type: ignore[arg-type]
        bcrypt_rounds=int(_get("INVENTORY_BCRYPT_ROUNDS", default="10")),  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
def get_repo_root() -> Path:
    return _REPO_ROOT


def get_data_dir() -> Path:
    return _REPO_ROOT / "data"
