# app/models/event.py
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from app.db.base_class import Base
import uuid


class Event(Base):
    """Event directory entry. Rows are owned by the event service; this
    service only reads them for lookups and capacity."""

    __tablename__ = "events"

    id = Column(
        String, primary_key=True, default=lambda: f"evt_{uuid.uuid4().hex[:12]}"
    )
    name = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String, nullable=True)
    # NULL means no explicit capacity; the configured default applies
    total_tickets = Column(Integer, nullable=True)

    registrations = relationship("Registration", back_populates="event")
