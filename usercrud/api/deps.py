"""Shared route dependencies: repository wiring, path parsing and access control."""
import logging
from typing import Optional, Type, TypeVar
from fastapi import Depends, Request
from pydantic import BaseModel, ValidationError as SchemaValidationError
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from usercrud.config import Settings
from usercrud.database import get_db
from usercrud.exceptions import AuthError, BadRequestError, InvalidBodyError
from usercrud.repositories.user_repository import UserRepository
from usercrud.services import auth_service

logger = logging.getLogger("usercrud.auth")

MAX_USER_ID = 2 ** 32 - 1

security = HTTPBearer(auto_error=False)

Payload = TypeVar("Payload", bound=BaseModel)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Build a repository over the request's session."""
    return UserRepository(db)


def parse_user_id(user_id: str) -> int:
    """
    Parse the ``{user_id}`` path segment as an unsigned 32-bit integer.

    Raises:
        BadRequestError: if the segment is not a valid id
    """
    if not (user_id.isascii() and user_id.isdigit()):
        raise BadRequestError()
    value = int(user_id)
    if value > MAX_USER_ID:
        raise BadRequestError()
    return value


def extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> str:
    """
    Return the bearer token of the request, or an empty string.

    A ``token`` query parameter takes precedence over the Authorization
    header.
    """
    token = request.query_params.get("token")
    if token:
        return token
    if credentials is None:
        return ""
    return credentials.credentials


async def authorize(
    request: Request,
    user_id: int = Depends(parse_user_id),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> int:
    """
    Require a valid token issued for the user named in the path.

    Returns the authorized user id.

    Raises:
        AuthError: missing or invalid token, or a token for another user
    """
    token = extract_token(request, credentials)
    try:
        subject_id = auth_service.verify_token(token, settings)
    except AuthError:
        logger.debug("Rejected token for user %s", user_id)
        raise AuthError("Unauthorized")
    if subject_id != user_id:
        logger.debug("User %s attempted to modify user %s", subject_id, user_id)
        raise AuthError("Unauthorized")
    return user_id


async def read_payload(request: Request, schema: Type[Payload]) -> Payload:
    """
    Parse the request body into ``schema``.

    An empty body parses as ``{}`` so missing fields reach the entity rules.

    Raises:
        InvalidBodyError: if the body is not valid JSON of the expected shape
    """
    body = await request.body()
    try:
        return schema.model_validate_json(body or b"{}")
    except SchemaValidationError as e:
        logger.debug("Rejected request body: %s", e.errors())
        raise InvalidBodyError() from e
