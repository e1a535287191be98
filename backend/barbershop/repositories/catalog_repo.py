"""Read-only repository for barbers and services."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from barbershop.core.exceptions import StorageError
from barbershop.db.base import Barber as DbBarber
from barbershop.db.base import Service as DbService
from barbershop.domain.entities import Barber, Service
from barbershop.domain.interfaces import ICatalogReader


class CatalogRepository(ICatalogReader):
    def __init__(self, db_session) -> None:
        self.db = db_session

    def get_barbers(self, only_available: bool = True) -> List[Barber]:
        stmt = select(DbBarber)
        if only_available:
            stmt = stmt.where(DbBarber.available.is_(True))
        stmt = stmt.order_by(DbBarber.name)
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("get_barbers", e) from e
        return [self._barber_to_domain(row) for row in rows]

    def get_barber_by_id(self, barber_id: str) -> Optional[Barber]:
        try:
            row = self.db.get(DbBarber, barber_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("get_barber_by_id", e) from e
        return self._barber_to_domain(row) if row else None

    def get_services(self, only_active: bool = True) -> List[Service]:
        stmt = select(DbService)
        if only_active:
            stmt = stmt.where(DbService.active.is_(True))
        stmt = stmt.order_by(DbService.name)
        try:
            rows = self.db.scalars(stmt).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("get_services", e) from e
        return [self._service_to_domain(row) for row in rows]

    def get_service_by_id(self, service_id: str) -> Optional[Service]:
        try:
            row = self.db.get(DbService, service_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError("get_service_by_id", e) from e
        return self._service_to_domain(row) if row else None

    def _barber_to_domain(self, db_barber: DbBarber) -> Barber:
        return Barber(
            id=db_barber.id,
            name=db_barber.name,
            specialty=db_barber.specialty or "",
            available=bool(db_barber.available),
            email=db_barber.email or "",
            phone=db_barber.phone or "",
            rating=float(db_barber.rating or 0),
            services=list(db_barber.services or []),
            created_at=db_barber.created_at,
            updated_at=db_barber.updated_at,
        )

    def _service_to_domain(self, db_service: DbService) -> Service:
        return Service(
            id=db_service.id,
            name=db_service.name,
            duration=db_service.duration,
            price=float(db_service.price or 0),
            category=db_service.category or "",
            description=db_service.description or "",
            active=bool(db_service.active),
            created_at=db_service.created_at,
            updated_at=db_service.updated_at,
        )
