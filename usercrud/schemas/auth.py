"""Authentication schemas."""
from datetime import datetime
from pydantic import BaseModel

from usercrud.domain.user import User


class LoginRequest(BaseModel):
    """Login request schema."""
    email: str = ""
    password: str = ""
    
    def to_entity(self) -> User:
        return User(email=self.email, password=self.password)


class TokenPayload(BaseModel):
    """JWT token payload."""
    authorized: bool = True
    user_id: int
    exp: datetime
