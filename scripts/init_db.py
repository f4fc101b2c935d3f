"""Database initialization script."""
import argparse
import asyncio
import logging

from usercrud.config import get_settings
from usercrud.database import Database
from usercrud.main import configure_logging
from usercrud.seed import seed_users

logger = logging.getLogger("usercrud.scripts.init_db")


async def init_database(seed: bool) -> None:
    """Create all tables and optionally load the demo users."""
    settings = get_settings()
    database = Database(settings.database_url, echo=settings.database_echo)
    await database.connect()
    try:
        if seed:
            await seed_users(database)
        else:
            await database.create_all()
            logger.info("Tables created")
    finally:
        await database.disconnect()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--seed",
        action="store_true",
        help="drop the users table and insert the demo users",
    )
    args = parser.parse_args()
    configure_logging(get_settings())
    asyncio.run(init_database(args.seed))
