"""Pydantic schemas for request/response models."""
from usercrud.schemas.auth import LoginRequest, TokenPayload
from usercrud.schemas.user import UserPayload, UserResponse, ErrorResponse

__all__ = [
    "LoginRequest",
    "TokenPayload",
    "UserPayload",
    "UserResponse",
    "ErrorResponse",
]
