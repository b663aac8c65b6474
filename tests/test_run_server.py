"""Tests for the uvicorn launcher's settings."""

from __future__ import annotations

import os
import unittest
from unittest.mock import patch

import run_server


class TestRunServerSettings(unittest.TestCase):
    def test_defaults_do_not_reload(self):
        with patch.dict(os.environ):
            for key in ("INVENTORY_HOST", "INVENTORY_PORT", "INVENTORY_RELOAD"):
                os.environ.pop(key, None)
            args = run_server.parse_args([])
        self.assertEqual(args.host, "127.0.0.1")
        self.assertEqual(args.port, 8000)
        self.assertFalse(args.reload)

    def test_environment_settings(self):
        env = {"INVENTORY_HOST": "0.0.0.0", "INVENTORY_PORT": "9100", "INVENTORY_RELOAD": "yes"}
        with patch.dict(os.environ, env):
            args = run_server.parse_args([])
        self.assertEqual((args.host, args.port, args.reload), ("0.0.0.0", 9100, True))

    def test_flags_override_environment(self):
        with patch.dict(os.environ, {"INVENTORY_PORT": "9100"}):
            args = run_server.parse_args(["--port", "9200", "--reload"])
        self.assertEqual(args.port, 9200)
        self.assertTrue(args.reload)

    def test_store_description(self):
        with patch.dict(os.environ, {"INVENTORY_ENV": "production"}):
            self.assertIn("in-memory", run_server.describe_store())
        with patch.dict(os.environ, {"INVENTORY_ENV": "development",
                                     "INVENTORY_DB_PATH": "/srv/inventory/live.db"}):
            self.assertEqual(run_server.describe_store(), "/srv/inventory/live.db")

    def test_main_runs_uvicorn_with_settings(self):
        with patch("uvicorn.run") as run, patch.dict(os.environ, {"INVENTORY_ENV": "production", "INVENTORY_RELOAD": "false"}):
            run_server.main(["--host", "0.0.0.0", "--port", "8123"])
        run.assert_called_once_with("server.app:app", host="0.0.0.0", port=8123, reload=False)


if __name__ == "__main__":
    unittest.main()
