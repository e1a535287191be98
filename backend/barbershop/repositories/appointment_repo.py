"""
Appointment repository implementation following SOLID principles.

The repository never validates input; that is the service layer's job. Any
SQLAlchemy failure is surfaced as StorageError after the session has been
rolled back.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from barbershop.core.exceptions import NotFoundError, StorageError
from barbershop.db.base import Appointment as DbAppointment
from barbershop.domain.entities import Appointment as DomainAppointment
from barbershop.domain.entities import (
    AppointmentStats,
    AppointmentStatus,
    SearchCriteria,
)
from barbershop.domain.identifiers import new_entity_id
from barbershop.domain.interfaces import IAppointmentRepository
from barbershop.domain.intervals import TimeInterval

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50

_UPDATABLE_FIELDS = {
    "client_name",
    "client_phone",
    "date",
    "duration",
    "barber_id",
    "barber_name",
    "service_id",
    "service_name",
    "price",
    "status",
    "notes",
    "updated_at",
}


class AppointmentRepository(IAppointmentRepository):
    """Repository for Appointment persistence operations."""

    def __init__(self, db_session) -> None:
        self.db = db_session

    @contextmanager
    def _storage_guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Appointment storage failure",
                extra={"context": {"operation": operation, "error": str(e)}},
                exc_info=True,
            )
            raise StorageError(operation, e) from e

    # ---- writes ----

    def insert(self, appointment: DomainAppointment) -> str:
        appointment_id = appointment.id or new_entity_id()
        with self._storage_guard("insert"):
            db_appointment = DbAppointment(
                id=appointment_id,
                client_name=appointment.client_name,
                client_phone=appointment.client_phone,
                date=appointment.date,
                duration=appointment.duration,
                barber_id=appointment.barber_id,
                barber_name=appointment.barber_name,
                service_id=appointment.service_id,
                service_name=appointment.service_name,
                price=appointment.price,
                status=appointment.status,
                notes=appointment.notes,
                created_at=appointment.created_at,
                updated_at=appointment.updated_at,
            )
            self.db.add(db_appointment)
            self.db.commit()
        return appointment_id

    def update(
        self, appointment_id: str, changes: Dict[str, Any]
    ) -> Optional[DomainAppointment]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown appointment fields: {sorted(unknown)}")

        with self._storage_guard("update"):
            db_appointment = self.db.get(DbAppointment, appointment_id)
            if db_appointment is None:
                raise NotFoundError("Appointment", appointment_id)

            modified = [
                field
                for field, value in changes.items()
                if field != "updated_at" and getattr(db_appointment, field) != value
            ]
            if not modified:
                return None

            for field, value in changes.items():
                setattr(db_appointment, field, value)
            self.db.commit()
            self.db.refresh(db_appointment)
            return self._to_domain(db_appointment)

    def delete(self, appointment_id: str) -> bool:
        with self._storage_guard("delete"):
            db_appointment = self.db.get(DbAppointment, appointment_id)
            if db_appointment is None:
                return False
            self.db.delete(db_appointment)
            self.db.commit()
            return True

    # ---- reads ----

    def find_by_id(self, appointment_id: str) -> Optional[DomainAppointment]:
        with self._storage_guard("find_by_id"):
            db_appointment = self.db.get(DbAppointment, appointment_id)
        return self._to_domain(db_appointment) if db_appointment else None

    def find_by_date_range(
        self, start: datetime, end: datetime, barber_id: Optional[str] = None
    ) -> List[DomainAppointment]:
        stmt = select(DbAppointment).where(
            DbAppointment.date >= start, DbAppointment.date <= end
        )
        if barber_id:
            stmt = stmt.where(DbAppointment.barber_id == barber_id)
        stmt = stmt.order_by(DbAppointment.date.asc())
        return self._fetch(stmt, "find_by_date_range")

    def find_by_barber_and_window(
        self, barber_id: str, start: datetime, end: datetime
    ) -> List[DomainAppointment]:
        window = TimeInterval(start, end)
        with self._storage_guard("find_by_barber_and_window"):
            # Longest stored duration bounds how far back an intersecting
            # appointment can start.
            longest = self.db.scalar(
                select(func.max(DbAppointment.duration)).where(
                    DbAppointment.barber_id == barber_id
                )
            )
        if not longest:
            return []

        stmt = (
            select(DbAppointment)
            .where(
                DbAppointment.barber_id == barber_id,
                DbAppointment.date < end,
                DbAppointment.date > start - timedelta(minutes=longest),
            )
            .order_by(DbAppointment.date.asc())
        )
        candidates = self._fetch(stmt, "find_by_barber_and_window")
        return [apt for apt in candidates if apt.interval.overlaps(window)]

    def find_by_client(self, phone: str, limit: int = 10) -> List[DomainAppointment]:
        stmt = (
            select(DbAppointment)
            .where(DbAppointment.client_phone == phone)
            .order_by(DbAppointment.date.desc())
            .limit(limit)
        )
        return self._fetch(stmt, "find_by_client")

    def search(self, criteria: SearchCriteria) -> List[DomainAppointment]:
        stmt = select(DbAppointment)
        if criteria.client_name:
            stmt = stmt.where(
                func.lower(DbAppointment.client_name).contains(
                    criteria.client_name.lower(), autoescape=True
                )
            )
        if criteria.client_phone:
            stmt = stmt.where(
                DbAppointment.client_phone.contains(
                    criteria.client_phone, autoescape=True
                )
            )
        if criteria.start_date:
            stmt = stmt.where(DbAppointment.date >= criteria.start_date)
        if criteria.end_date:
            stmt = stmt.where(DbAppointment.date <= criteria.end_date)
        if criteria.status:
            stmt = stmt.where(DbAppointment.status == criteria.status)

        limit = min(criteria.limit or SEARCH_LIMIT, SEARCH_LIMIT)
        stmt = stmt.order_by(DbAppointment.date.desc()).limit(limit)
        return self._fetch(stmt, "search")

    def find_upcoming(self, now: datetime, limit: int = 20) -> List[DomainAppointment]:
        stmt = (
            select(DbAppointment)
            .where(
                DbAppointment.date >= now,
                DbAppointment.status == AppointmentStatus.SCHEDULED,
            )
            .order_by(DbAppointment.date.asc())
            .limit(limit)
        )
        return self._fetch(stmt, "find_upcoming")

    def find_past(self, now: datetime, limit: int = 20) -> List[DomainAppointment]:
        stmt = (
            select(DbAppointment)
            .where(
                DbAppointment.date < now,
                DbAppointment.status.in_(
                    [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED]
                ),
            )
            .order_by(DbAppointment.date.desc())
            .limit(limit)
        )
        return self._fetch(stmt, "find_past")

    def aggregate_stats(self, start: datetime, end: datetime) -> AppointmentStats:
        conditions = (
            DbAppointment.date >= start,
            DbAppointment.date <= end,
            DbAppointment.status != AppointmentStatus.CANCELLED,
        )

        def grouped(column):
            rows = self.db.execute(
                select(column, func.count())
                .where(*conditions)
                .group_by(column)
                .order_by(column)
            ).all()
            return rows

        day = func.date(DbAppointment.date)
        with self._storage_guard("aggregate_stats"):
            total = self.db.scalar(
                select(func.count()).select_from(DbAppointment).where(*conditions)
            )
            by_status = grouped(DbAppointment.status)
            by_barber = grouped(DbAppointment.barber_id)
            by_service = grouped(DbAppointment.service_id)
            by_day = grouped(day)
            revenue = self.db.scalar(
                select(
                    func.coalesce(func.sum(func.coalesce(DbAppointment.price, 0)), 0)
                ).where(*conditions)
            )

        return AppointmentStats(
            total_count=total or 0,
            count_by_status={key: count for key, count in by_status},
            count_by_barber={key: count for key, count in by_barber},
            count_by_service={key: count for key, count in by_service},
            # SQLite returns 'YYYY-MM-DD' strings, other dialects date objects
            count_by_day={str(key)[:10]: count for key, count in by_day},
            total_revenue=float(revenue or 0),
        )

    def ping(self) -> bool:
        with self._storage_guard("ping"):
            self.db.execute(text("SELECT 1"))
        return True

    # ---- helpers ----

    def _fetch(self, stmt, operation: str) -> List[DomainAppointment]:
        with self._storage_guard(operation):
            rows = self.db.scalars(stmt).all()
        return [self._to_domain(row) for row in rows]

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        """Convert database model to domain entity."""
        return DomainAppointment(
            id=db_appointment.id,
            client_name=db_appointment.client_name,
            client_phone=db_appointment.client_phone,
            date=db_appointment.date,
            duration=db_appointment.duration,
            barber_id=db_appointment.barber_id,
            barber_name=db_appointment.barber_name or "",
            service_id=db_appointment.service_id,
            service_name=db_appointment.service_name or "",
            price=float(db_appointment.price or 0),
            status=db_appointment.status,
            notes=db_appointment.notes or "",
            created_at=db_appointment.created_at,
            updated_at=db_appointment.updated_at,
        )
