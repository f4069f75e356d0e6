"""User ORM model: profile data read by roster and approval listings."""
import uuid
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from registrar.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=True)
    username = Column(String(50), nullable=True, unique=True)
    email = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
