#!/usr/bin/env python3
"""Launch the inventory API under uvicorn.

Settings come from INVENTORY_HOST / INVENTORY_PORT / INVENTORY_RELOAD (or the
matching flags); the store is whatever ``get_database_config()`` selects.
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from dotenv import load_dotenv
load_dotenv()

from inventory.config import get_database_config


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the inventory API server")
    parser.add_argument("--host", default=os.getenv("INVENTORY_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("INVENTORY_PORT", "8000")))
    parser.add_argument(
        "--reload",
        action="store_true",
        default=_truthy(os.getenv("INVENTORY_RELOAD", "false")),
        help="Restart on code changes (development only)",
    )
    return parser.parse_args(argv)


def describe_store() -> str:
    cfg = get_database_config()
    return "in-memory (discarded on exit)" if cfg.in_memory else cfg.target


def main(argv=None):
    import uvicorn

    args = parse_args(argv)
    print(f"Inventory API on http://{args.host}:{args.port}  (docs at /docs)")
    print(f"Database: {describe_store()}")
    if args.reload:
        print("Auto-reload enabled")

    uvicorn.run("server.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
