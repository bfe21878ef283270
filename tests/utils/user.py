import uuid

from sqlalchemy.orm import Session
from app.models.user import User


def create_random_user(db: Session) -> User:
    """
    Inserts a user directory row for testing purposes.
    """
    suffix = uuid.uuid4().hex[:12]
    user = User(
        id=f"usr_{suffix}",
        full_name="Test User",
        email=f"user_{suffix}@example.com",
        phone="+15550000000",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
