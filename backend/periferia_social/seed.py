"""
Periferia Social Backend — Development Seed
============================================

What:  Resets the database to three demo users with one post each.
How:   `python -m periferia_social.seed` (or the `periferia-seed` script).
       Ensures the schema exists, deletes every like, post and user, then
       recreates the demo data in a single transaction.

Demo accounts (password 123456 for all):
    juan@example.com   alias juanp
    maria@example.com  alias mariag
    luis@example.com   alias luisr

Never run against a database whose data you want to keep.
"""

import asyncio
import logging
import sys
from datetime import date
from typing import Optional

from sqlalchemy import delete

from periferia_social.config import settings
from periferia_social.database import Database
from periferia_social.models import Like, Post, User
from periferia_social.services.user_service import user_service

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "123456"

DEMO_USERS = [
    {
        "first_name": "Juan",
        "last_name": "Perez",
        "email": "juan@example.com",
        "birth_date": date(1990, 1, 1),
        "alias": "juanp",
    },
    {
        "first_name": "Maria",
        "last_name": "Gomez",
        "email": "maria@example.com",
        "birth_date": date(1992, 5, 10),
        "alias": "mariag",
    },
    {
        "first_name": "Luis",
        "last_name": "Ramirez",
        "email": "luis@example.com",
        "birth_date": date(1988, 11, 20),
        "alias": "luisr",
    },
]


async def seed(database: Database) -> int:
    """Replaces all data with the demo users and their greeting posts. Returns the user count."""
    await database.create_schema()

    async with database.session() as session:
        async with session.begin():
            # Children first: no FK cascade is assumed here
            await session.execute(delete(Like))
            await session.execute(delete(Post))
            await session.execute(delete(User))

            for data in DEMO_USERS:
                user = await user_service.create_user(session, password=DEMO_PASSWORD, **data)
                session.add(Post(message=f"Hola, soy {data['first_name']}", user_id=user.id))

    logger.info("Seeded %d users with one post each", len(DEMO_USERS))
    return len(DEMO_USERS)


async def _main(database: Optional[Database] = None) -> None:
    database = database or Database.from_settings(settings)
    try:
        await seed(database)
    finally:
        await database.dispose()


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        asyncio.run(_main())
    except Exception:
        logger.exception("Seeding failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
