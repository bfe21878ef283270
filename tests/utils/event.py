from typing import Optional

from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from app.models.event import Event


def create_random_event(db: Session, total_tickets: Optional[int] = None) -> Event:
    """
    Inserts an event directory row for testing purposes.
    """
    event = Event(
        name="Test Event",
        date=datetime.now(timezone.utc) + timedelta(days=10),
        location="Main Hall",
        total_tickets=total_tickets,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event
