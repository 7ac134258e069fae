#!/usr/bin/env python3
"""
Seed the project suggestion catalogue.

Usage:
    python scripts/seed_projects.py              # Clear and reload the catalogue
    python scripts/seed_projects.py --if-empty   # Only load into an empty table
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


async def seed(replace: bool) -> int:
    from pathforge.core.database import init_db, get_session_local, close_db
    from pathforge.db.project_catalog import seed_project_suggestions

    await init_db()
    try:
        async with get_session_local()() as session:
            return await seed_project_suggestions(session, replace=replace)
    finally:
        await close_db()


def main():
    parser = argparse.ArgumentParser(description="Seed project suggestions")
    parser.add_argument("--if-empty", action="store_true", help="Skip when suggestions already exist")
    args = parser.parse_args()

    inserted = asyncio.run(seed(replace=not args.if_empty))
    print(f"[Seed] Inserted {inserted} project suggestions")


if __name__ == "__main__":
    main()
