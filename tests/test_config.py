"""Tests for environment-driven configuration."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from inventory.config import (
    MEMORY_TARGET,
    get_data_dir,
    get_database_config,
    get_repo_root,
    get_seed_config,
)


class TestDatabaseConfig(unittest.TestCase):
    def test_production_uses_memory(self):
        with patch.dict(os.environ, {"INVENTORY_ENV": "production",
                                     "INVENTORY_DB_PATH": "/tmp/ignored.db"}):
            cfg = get_database_config()
        self.assertEqual(cfg.target, MEMORY_TARGET)
        self.assertTrue(cfg.in_memory)

    def test_production_is_case_insensitive(self):
        with patch.dict(os.environ, {"INVENTORY_ENV": "Production"}):
            self.assertTrue(get_database_config().in_memory)

    def test_development_defaults_to_repo_data_file(self):
        with patch.dict(os.environ, {"INVENTORY_ENV": "development"}):
            os.environ.pop("INVENTORY_DB_PATH", None)
            cfg = get_database_config()
        self.assertFalse(cfg.in_memory)
        self.assertEqual(cfg.target, str(get_data_dir() / "inventory.db"))
        self.assertTrue(Path(cfg.target).is_relative_to(get_repo_root()))

    def test_path_override_is_honored(self):
        with tempfile.TemporaryDirectory() as tmp:
            target = str(Path(tmp) / "custom.db")
            with patch.dict(os.environ, {"INVENTORY_DB_PATH": target}):
                os.environ.pop("INVENTORY_ENV", None)
                cfg = get_database_config()
        self.assertEqual(cfg.target, target)
        self.assertFalse(cfg.in_memory)

    def test_memory_override(self):
        with patch.dict(os.environ, {"INVENTORY_ENV": "development",
                                     "INVENTORY_DB_PATH": MEMORY_TARGET}):
            cfg = get_database_config()
        self.assertTrue(cfg.in_memory)


class TestSeedConfig(unittest.TestCase):
    def test_values_from_environment(self):
        with patch.dict(os.environ, {"INVENTORY_ADMIN_PASSWORD": "hunter22",
                                     "INVENTORY_BCRYPT_ROUNDS": "5"}):
            cfg = get_seed_config()
        self.assertEqual(cfg.admin_password, "hunter22")
        self.assertEqual(cfg.bcrypt_rounds, 5)

    def test_defaults(self):
        with patch.dict(os.environ):
            os.environ.pop("INVENTORY_ADMIN_PASSWORD", None)
            os.environ.pop("INVENTORY_BCRYPT_ROUNDS", None)
            cfg = get_seed_config()
        self.assertEqual(cfg.admin_password, "admin123")
        self.assertEqual(cfg.bcrypt_rounds, 10)


if __name__ == "__main__":
    unittest.main()
