"""
User repository.

The only component that writes to the ``users`` table. Store errors are
translated into domain exceptions here so that nothing driver-specific
reaches the handlers.
"""
import logging
import re
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Iterator, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from usercrud.domain.user import User
from usercrud.exceptions import ConflictError, NotFoundError, StorageError
from usercrud.models.user import UserModel
from usercrud.services.auth_service import hash_password

logger = logging.getLogger("usercrud.repository")

MAX_RESULTS = 100

# Constraint identifiers reported by the supported drivers
UNIQUE_FIELDS = {
    "uq_users_address": "address",
    "uq_users_email": "email",
    "users.address": "address",
    "users.email": "email",
}

_MYSQL_DUPLICATE_KEY = re.compile(r"for key '([^']+)'")
_SQLITE_UNIQUE = re.compile(r"UNIQUE constraint failed: ([\w.]+(?:, [\w.]+)*)")


def _constraint_identifiers(error: IntegrityError) -> Iterator[str]:
    """Yield the constraint or column identifiers the driver reported."""
    # Async adapters wrap the driver's own exception
    sources = [error.orig, getattr(error.orig, "__cause__", None)]

    # PostgreSQL drivers carry the constraint name as a field
    for source in sources + [getattr(error.orig, "diag", None)]:
        name = getattr(source, "constraint_name", None)
        if name:
            yield name

    for source in sources:
        for arg in getattr(source, "args", ()):
            if not isinstance(arg, str):
                continue
            match = _MYSQL_DUPLICATE_KEY.search(arg)
            if match:
                key = match.group(1)
                yield key
                # MySQL 8 prefixes the key with the table name
                yield key.rsplit(".", 1)[-1]
            match = _SQLITE_UNIQUE.search(arg)
            if match:
                yield from match.group(1).split(", ")


def conflicting_field(error: IntegrityError) -> Optional[str]:
    """Return the user field whose unique constraint was violated, if known."""
    for identifier in _constraint_identifiers(error):
        field = UNIQUE_FIELDS.get(identifier)
        if field:
            return field
    return None


class UserRepository:
    """SQLAlchemy repository for user rows."""

    def __init__(self, session: AsyncSession):
        """
        Args:
            session: SQLAlchemy async session, owned by the caller
        """
        self.session = session

    @asynccontextmanager
    async def _write(self) -> AsyncGenerator[None, None]:
        """Commit the enclosed statements, mapping store errors on failure."""
        try:
            yield
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            field = conflicting_field(e)
            if field is None:
                logger.exception("Unclassified integrity error")
                raise StorageError() from e
            raise ConflictError(field) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Storage failure while writing user")
            raise StorageError() from e

    async def create(self, user: User) -> User:
        """
        Hash the password and insert a new row.

        Raises:
            ConflictError: address or email already taken
            StorageError: any other store failure
        """
        now = datetime.utcnow()
        model = UserModel(
            address=user.address,
            email=user.email,
            password=hash_password(user.password),
            created_at=user.created_at or now,
            updated_at=user.updated_at or now,
        )
        async with self._write():
            self.session.add(model)
            await self.session.flush()

        logger.info("Created user %s", model.id)
        return self._to_entity(model)

    async def find_all(self, limit: int = MAX_RESULTS) -> List[User]:
        """Return up to ``limit`` users (capped at 100) in store order."""
        stmt = select(UserModel).limit(min(limit, MAX_RESULTS))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Storage failure while listing users")
            raise StorageError() from e
        return [self._to_entity(model) for model in result.scalars().all()]

    async def find_by_id(self, user_id: int) -> User:
        """
        Raises:
            NotFoundError: no user has this id
        """
        return await self._find_one(UserModel.id == user_id)

    async def find_by_email(self, email: str) -> User:
        """
        Raises:
            NotFoundError: no user has this email
        """
        return await self._find_one(UserModel.email == email)

    async def _find_one(self, criterion) -> User:
        stmt = (
            select(UserModel)
            .where(criterion)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Storage failure while reading user")
            raise StorageError() from e
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError()
        return self._to_entity(model)

    async def update(self, user_id: int, user: User) -> User:
        """
        Overwrite password, address, email and updated_at of one row.

        The id and created_at columns are never touched.

        Raises:
            NotFoundError: no user has this id
            ConflictError: address or email already taken
            StorageError: any other store failure
        """
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(
                password=hash_password(user.password),
                address=user.address,
                email=user.email,
                updated_at=datetime.utcnow(),
            )
        )
        async with self._write():
            result = await self.session.execute(stmt)

        if result.rowcount == 0:
            raise NotFoundError()
        logger.info("Updated user %s", user_id)
        return await self.find_by_id(user_id)

    async def delete(self, user_id: int) -> int:
        """Delete one row and return how many rows were affected (0 or 1)."""
        stmt = delete(UserModel).where(UserModel.id == user_id)
        async with self._write():
            result = await self.session.execute(stmt)

        if result.rowcount:
            logger.info("Deleted user %s", user_id)
        return result.rowcount

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            address=model.address,
            email=model.email,
            password=model.password,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
