"""Persistence repositories."""
from usercrud.repositories.user_repository import UserRepository

__all__ = ["UserRepository"]
