# app/models/user.py
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid


class User(Base):
    """User directory entry, owned by the user service."""

    __tablename__ = "users"

    id = Column(
        String, primary_key=True, default=lambda: f"usr_{uuid.uuid4().hex[:12]}"
    )
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    phone = Column(String, nullable=True)

    registrations = relationship("Registration", back_populates="user")
