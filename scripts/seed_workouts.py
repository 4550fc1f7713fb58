"""Load the starter exercise catalog into the configured database."""
import asyncio
import sys
import os
sys.path.insert(0, os.getcwd())

from app.core.logging import configure_logging
from app.db.database import async_session_maker, close_engine, init_db
from app.db.seed import STARTER_CATALOG, seed_workouts


async def main():
    configure_logging()
    await init_db()
    async with async_session_maker() as session:
        inserted = await seed_workouts(session)
    await close_engine()

    print("=" * 80)
    print(f"Catalog entries: {len(STARTER_CATALOG)}  inserted: {inserted}")
    print("=" * 80)


if __name__ == "__main__":
    asyncio.run(main())
