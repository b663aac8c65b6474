"""Quick check of database state."""
import asyncio
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from inventory.db.database import get_db, reset_db
from inventory.db.schema import TABLE_NAMES


async def main():
    db = get_db()
    try:
        print(f"Database: {db.target}")
        for table in TABLE_NAMES:
            rows = await db.fetchall(f"SELECT * FROM {table}")
            print(f"\n=== {table} ===")
            print(f"Total: {len(rows)}")
            for r in rows:
                if table == "users":
                    r = {k: v for k, v in r.items() if k != "password"}
                print(f"  {r}")
    finally:
        await reset_db()


asyncio.run(main())
