# app/crud/crud_registration.py
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session, joinedload

from .base import CRUDBase
from app.models.registration import Registration
from app.schemas.registration import RegistrationCreate, RegistrationUpdate


class CRUDRegistration(CRUDBase[Registration, RegistrationCreate, RegistrationUpdate]):
    def _with_directory(self, db: Session):
        # Responses embed user and event summaries
        return db.query(self.model).options(
            joinedload(self.model.user), joinedload(self.model.event)
        )

    def get_by_user_and_event(
        self, db: Session, *, user_id: str, event_id: str
    ) -> Registration | None:
        """
        Checks if a registration already exists for the user on this event.
        """
        return (
            db.query(self.model)
            .filter(
                and_(self.model.event_id == event_id, self.model.user_id == user_id)
            )
            .first()
        )

    def get_count_by_event(self, db: Session, *, event_id: str) -> int:
        """
        Counts the number of registrations for a specific event.
        """
        return db.query(self.model).filter(self.model.event_id == event_id).count()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100
    ) -> list[Registration]:
        return (
            self._with_directory(db)
            .order_by(self.model.registration_date.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_multi_by_event(
        self, db: Session, *, event_id: str, skip: int = 0, limit: int = 100
    ) -> list[Registration]:
        return (
            self._with_directory(db)
            .filter(self.model.event_id == event_id)
            .order_by(self.model.registration_date.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_multi_by_user(
        self, db: Session, *, user_id: str, skip: int = 0, limit: int = 100
    ) -> list[Registration]:
        return (
            self._with_directory(db)
            .filter(self.model.user_id == user_id)
            .order_by(self.model.registration_date.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_multi_by_status(
        self, db: Session, *, status: str, skip: int = 0, limit: int = 100
    ) -> list[Registration]:
        """Newest registrations first."""
        return (
            self._with_directory(db)
            .filter(self.model.status == status)
            .order_by(self.model.registration_date.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def create_for_user(
        self, db: Session, *, obj_in: RegistrationCreate
    ) -> Registration:
        """
        Inserts a registration in its initial state and commits.

        Raises sqlalchemy.exc.IntegrityError when the (event_id, user_id)
        unique constraint rejects the row; the caller maps that to a
        duplicate registration.
        """
        db_obj = self.model(
            user_id=obj_in.user_id,
            event_id=obj_in.event_id,
            registration_date=datetime.now(timezone.utc),
            admin_booked=obj_in.admin_booked,
            admin_override_reason=(
                obj_in.admin_override_reason if obj_in.admin_booked else None
            ),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def save(self, db: Session, *, db_obj: Registration) -> Registration:
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_stats(self, db: Session, *, event_id: Optional[str] = None) -> dict:
        """
        Aggregates registration counts by status, by face verification
        status, and ticket totals. Optionally scoped to one event.
        """
        base = db.query(self.model)
        if event_id:
            base = base.filter(self.model.event_id == event_id)

        status_rows = (
            base.with_entities(self.model.status, func.count(self.model.id))
            .group_by(self.model.status)
            .all()
        )
        face_rows = (
            base.with_entities(
                self.model.face_verification_status, func.count(self.model.id)
            )
            .group_by(self.model.face_verification_status)
            .all()
        )
        total, issued, admin_booked = base.with_entities(
            func.count(self.model.id),
            func.sum(case((self.model.ticket_issued.is_(True), 1), else_=0)),
            func.sum(case((self.model.admin_booked.is_(True), 1), else_=0)),
        ).one()

        return {
            "status_counts": {status: count for status, count in status_rows},
            "face_verification_counts": {
                status: count for status, count in face_rows
            },
            "ticket_stats": {
                "total_registrations": total or 0,
                "tickets_issued": issued or 0,
                "admin_booked": admin_booked or 0,
            },
        }


registration = CRUDRegistration(Registration)
