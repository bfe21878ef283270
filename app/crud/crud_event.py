# app/crud/crud_event.py
from typing import Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from .base import CRUDBase
from app.models.event import Event


class CRUDEvent(CRUDBase[Event, BaseModel, BaseModel]):
    """Read-only access to the event directory."""

    def get_capacity(self, event: Event, default: int) -> int:
        return event.total_tickets if event.total_tickets is not None else default

    def lock(self, db: Session, *, event_id: str) -> Optional[Event]:
        """
        Locks the event row so concurrent registrations for the same event
        are counted one at a time. No-op on backends without FOR UPDATE.
        """
        return self.get_for_update(db, event_id)


event = CRUDEvent(Event)
