"""Domain entities."""
from usercrud.domain.user import User, VALIDATION_RULES

__all__ = ["User", "VALIDATION_RULES"]
