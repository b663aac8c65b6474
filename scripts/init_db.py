#!/usr/bin/env python3
"""Initialize the database and optionally seed extra products from a YAML file."""

from __future__ import annotations

import argparse
import asyncio
import sqlite3
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from inventory.db.database import Database
from inventory.db.product_repo import ProductRepository
from inventory.models.product import Product


def main():
    parser = argparse.ArgumentParser(description="Initialize the database")
    parser.add_argument("--seed-products", type=str, help="YAML file with product definitions")
    parser.add_argument("--db-path", type=str, help="Override database path")
    args = parser.parse_args()
    asyncio.run(_run(args.db_path, args.seed_products))


async def _run(db_path: str | None, seed_products: str | None):
    db = Database(db_path)
    try:
        await db.get_client()
        print(f"Database initialized at: {db.target}")

        if seed_products:
            await _seed_products(db, Path(seed_products))
    finally:
        await db.close()
    print("Done.")


async def _seed_products(db: Database, path: Path):
    import yaml
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    repo = ProductRepository(db)
    for p in data.get("products", []):
        try:
            product = Product(
                name=p["name"],
                sku=p["sku"],
                quantity=int(p.get("quantity", 0)),
                reorder_level=int(p.get("reorder_level", 0)),
                price=float(p["price"]),
                cost=float(p.get("cost", 0)),
                category=p.get("category", "Uncategorized"),
            )
            await repo.create(product)
            print(f"  Created product: {product.name} ({product.sku})")
        except (KeyError, ValueError, sqlite3.IntegrityError) as e:
            print(f"  Skipping {p.get('sku', '?')}: {e}")


if __name__ == "__main__":
    main()
