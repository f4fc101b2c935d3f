"""Initial schema and demo data."""
import logging
from typing import List

from usercrud.database import Database
from usercrud.domain.user import User
from usercrud.repositories.user_repository import UserRepository

logger = logging.getLogger("usercrud.seed")

DEMO_USERS = [
    {"email": "koga@gmail.com", "password": "password", "address": "Jl.Manggis No.29"},
    {"email": "testing@gmail.com", "password": "password", "address": "Jl.Apel No.99"},
]


async def seed_users(database: Database) -> List[User]:
    """Recreate the users table and insert the demo users."""
    await database.drop_all()
    await database.create_all()

    created = []
    async with database.session() as session:
        repository = UserRepository(session)
        for data in DEMO_USERS:
            created.append(await repository.create(User(**data).normalize()))
    logger.info("Seeded %d users", len(created))
    return created
