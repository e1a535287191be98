from .appointment_repo import AppointmentRepository
from .catalog_repo import CatalogRepository

__all__ = ["AppointmentRepository", "CatalogRepository"]
