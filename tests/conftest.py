"""
Test fixtures and configuration.

Every test gets its own SQLite database file through aiosqlite.
"""

from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from usercrud.config import Settings
from usercrud.database import Database
from usercrud.domain.user import User
from usercrud.main import create_app
from usercrud.repositories.user_repository import UserRepository
from usercrud.seed import seed_users
from usercrud.services.auth_service import create_access_token


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'users.db'}",
        seed_on_startup=False,
        jwt_secret_key="test-signing-key-for-the-user-crud-suite",
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """Connected database with an empty users table."""
    db = Database(settings.database_url)
    await db.connect()
    await db.create_all()

    yield db

    await db.disconnect()


@pytest_asyncio.fixture
async def repository(database: Database) -> AsyncGenerator[UserRepository, None]:
    """Repository over a fresh session."""
    async with database.session() as session:
        yield UserRepository(session)


@pytest_asyncio.fixture
async def client(settings: Settings, database: Database) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client talking to the application in-process."""
    app = create_app(settings, database=database)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def seeded_users(database: Database) -> List[User]:
    """The two demo users, both with password ``password``."""
    return await seed_users(database)


@pytest.fixture
def auth_headers(settings: Settings):
    """Build an Authorization header carrying a token for ``user_id``."""
    def _headers(user_id: int) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, settings)}"}
    return _headers
