"""
Catalog controller - read-only barber and service listings.
"""

from flask import Blueprint

from barbershop.core.api_utils import api_response, booking_service_scope
from barbershop.schemas.dtos import barber_to_dict, service_to_dict

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


@catalog_bp.route("/barbers", methods=["GET"])
def list_barbers():
    """Barbers currently taking bookings, ordered by name."""
    with booking_service_scope() as service:
        barbers = service.get_barbers()
    return api_response(
        True, f"{len(barbers)} barber(s)", [barber_to_dict(b) for b in barbers]
    )


@catalog_bp.route("/services", methods=["GET"])
def list_services():
    with booking_service_scope() as service:
        services = service.get_services()
    return api_response(
        True, f"{len(services)} service(s)", [service_to_dict(s) for s in services]
    )
