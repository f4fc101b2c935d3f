"""SQLAlchemy models."""
from usercrud.models.user import UserModel

__all__ = ["UserModel"]
