from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from barbershop.domain.identifiers import new_entity_id

from .session import Base


class Barber(Base):
    """Barber reference data (read-only for the scheduling core)"""

    __tablename__ = "barbers"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_entity_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    specialty: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # Names of the services this barber offers
    services: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=datetime.now
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=datetime.now, onupdate=datetime.now
    )

    def __repr__(self):
        return f"<Barber(id={self.id}, name='{self.name}')>"


class Service(Base):
    """Bookable service (read-only for the scheduling core)"""

    __tablename__ = "services"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_entity_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False, default=0
    )
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=datetime.now
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=datetime.now, onupdate=datetime.now
    )

    def __repr__(self):
        return f"<Service(id={self.id}, name='{self.name}', duration={self.duration})>"


class Appointment(Base):
    """Appointment model.

    barber_name and service_name are copied from Barber/Service at creation
    time and have no foreign key back to them. price is whatever the caller
    charged, 0 when left out.
    """

    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_entity_id)
    client_name: Mapped[str] = mapped_column(String(120), nullable=False)
    client_phone: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    barber_id: Mapped[str] = mapped_column(String(24), nullable=False, index=True)
    barber_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    service_id: Mapped[str] = mapped_column(String(24), nullable=False)
    service_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    price: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=True, default=0
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="scheduled", index=True
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_appointments_barber_date_status", "barber_id", "date", "status"),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, barber_id={self.barber_id}, "
            f"date={self.date}, status='{self.status}')>"
        )
