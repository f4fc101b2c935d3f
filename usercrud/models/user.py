"""User table."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, UniqueConstraint
from usercrud.database import Base


class UserModel(Base):
    """Stored user row. ``password`` always holds a bcrypt hash."""
    
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("address", name="uq_users_address"),
        UniqueConstraint("email", name="uq_users_email"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    address = Column(String(255), nullable=False)
    email = Column(String(100), nullable=False)
    password = Column(String(100), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    
    def __repr__(self):
        return f"<UserModel(id={self.id}, email={self.email})>"
