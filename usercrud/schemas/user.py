"""User schemas."""
from datetime import datetime
from pydantic import BaseModel

from usercrud.domain.user import User


class UserPayload(BaseModel):
    """
    Body of create and update requests.

    Fields default to empty strings so that missing values reach the
    entity's validation rules instead of failing schema parsing.
    """
    address: str = ""
    email: str = ""
    password: str = ""
    
    def to_entity(self) -> User:
        return User(address=self.address, email=self.email, password=self.password)


class UserResponse(BaseModel):
    """User as returned to clients; never includes the password."""
    id: int
    address: str
    email: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class ErrorResponse(BaseModel):
    """Body of every failed request."""
    error: str
