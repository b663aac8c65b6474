"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

# Cheap bcrypt work factor for tests; must be set before .env is read.
os.environ.setdefault("INVENTORY_BCRYPT_ROUNDS", "4")
os.environ.setdefault("INVENTORY_DB_PATH", ":memory:")

from dotenv import load_dotenv
load_dotenv()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")
