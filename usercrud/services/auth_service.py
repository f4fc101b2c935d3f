"""Password hashing and access tokens."""
from datetime import datetime, timedelta
from typing import Optional
import jwt
import bcrypt
from usercrud.config import Settings, get_settings
from usercrud.exceptions import AuthError, HashError
from usercrud.schemas.auth import TokenPayload


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Raises:
        HashError: if bcrypt rejects the input
    """
    try:
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')
    except ValueError as e:
        raise HashError() from e


def verify_password(plain_password: str, hashed_password: str) -> None:
    """
    Verify a password against its hash.

    Raises:
        AuthError: if the password does not match or the hash is unusable
    """
    try:
        matches = bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        matches = False
    if not matches:
        raise AuthError("Incorrect Password")


def create_access_token(user_id: int, settings: Optional[Settings] = None) -> str:
    """Create a JWT access token bound to ``user_id``, signed with the settings' key."""
    settings = settings or get_settings()
    expire = datetime.utcnow() + timedelta(hours=settings.jwt_expire_hours)
    payload = {
        "authorized": True,
        "user_id": user_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> TokenPayload:
    """
    Decode and validate a JWT access token.

    Raises:
        AuthError: if the token is missing, malformed, expired or badly signed
    """
    if not token:
        raise AuthError()
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["exp", "user_id"]},
        )
    except jwt.PyJWTError as e:
        raise AuthError() from e
    try:
        return TokenPayload(**payload)
    except ValueError as e:
        raise AuthError() from e


def verify_token(token: str, settings: Optional[Settings] = None) -> int:
    """Return the user id the token was issued for."""
    payload = decode_access_token(token, settings)
    if not payload.authorized or payload.user_id <= 0:
        raise AuthError()
    return payload.user_id
