"""
Appointment controller - HTTP routes for the booking call surface.

Handles HTTP concerns only: pulls arguments out of the request, calls the
matching BookingService method and serializes the result. Scheduling errors
propagate to the handlers registered in core.api_utils.
"""

import logging

from flask import Blueprint, request

from barbershop.core.api_utils import api_response, booking_service_scope
from barbershop.schemas.dtos import barber_to_dict, slot_to_dict, stats_to_dict

logger = logging.getLogger(__name__)

appointment_bp = Blueprint("appointments", __name__, url_prefix="/api")


def _json_body() -> dict:
    return request.get_json(silent=True) or {}


@appointment_bp.route("/appointments", methods=["GET"])
def list_appointments():
    """List appointments of one day (``?date=YYYY-MM-DD``)."""
    with booking_service_scope() as service:
        appointments = service.get_appointments(request.args.get("date"))
    return api_response(
        True,
        f"{len(appointments)} appointment(s) found",
        [apt.to_dict() for apt in appointments],
    )


@appointment_bp.route("/appointments", methods=["POST"])
def create_appointment():
    with booking_service_scope() as service:
        appointment = service.create_appointment(_json_body())
    return api_response(True, "Appointment created", appointment.to_dict(), 201)


@appointment_bp.route("/appointments/search", methods=["POST"])
def search_appointments():
    with booking_service_scope() as service:
        appointments = service.search_appointments(_json_body())
    return api_response(
        True,
        f"{len(appointments)} appointment(s) found",
        [apt.to_dict() for apt in appointments],
    )


@appointment_bp.route("/appointments/stats", methods=["GET"])
def appointment_stats():
    with booking_service_scope() as service:
        stats = service.get_appointment_stats(
            request.args.get("start_date"), request.args.get("end_date")
        )
    return api_response(True, "Statistics computed", stats_to_dict(stats))


@appointment_bp.route("/appointments/upcoming", methods=["GET"])
def upcoming_appointments():
    with booking_service_scope() as service:
        appointments = service.get_upcoming_appointments(request.args.get("limit"))
    return api_response(
        True,
        f"{len(appointments)} upcoming appointment(s)",
        [apt.to_dict() for apt in appointments],
    )


@appointment_bp.route("/appointments/past", methods=["GET"])
def past_appointments():
    with booking_service_scope() as service:
        appointments = service.get_past_appointments(request.args.get("limit"))
    return api_response(
        True,
        f"{len(appointments)} past appointment(s)",
        [apt.to_dict() for apt in appointments],
    )


@appointment_bp.route("/appointments/client/<phone>", methods=["GET"])
def client_appointments(phone: str):
    with booking_service_scope() as service:
        appointments = service.get_appointments_by_client(
            phone, request.args.get("limit")
        )
    return api_response(
        True,
        f"{len(appointments)} appointment(s) found",
        [apt.to_dict() for apt in appointments],
    )


@appointment_bp.route("/appointments/<appointment_id>", methods=["GET"])
def get_appointment(appointment_id: str):
    with booking_service_scope() as service:
        appointment = service.get_appointment_by_id(appointment_id)
    return api_response(True, "Appointment found", appointment.to_dict())


@appointment_bp.route("/appointments/<appointment_id>", methods=["PUT", "PATCH"])
def update_appointment(appointment_id: str):
    with booking_service_scope() as service:
        appointment = service.update_appointment(appointment_id, _json_body())
    return api_response(True, "Appointment updated", appointment.to_dict())


@appointment_bp.route("/appointments/<appointment_id>", methods=["DELETE"])
def delete_appointment(appointment_id: str):
    with booking_service_scope() as service:
        service.delete_appointment(appointment_id)
    return api_response(True, "Appointment deleted")


@appointment_bp.route("/appointments/<appointment_id>/cancel", methods=["POST"])
def cancel_appointment(appointment_id: str):
    with booking_service_scope() as service:
        appointment = service.cancel_appointment(
            appointment_id, _json_body().get("reason")
        )
    return api_response(True, "Appointment cancelled", appointment.to_dict())


@appointment_bp.route("/appointments/<appointment_id>/complete", methods=["POST"])
def complete_appointment(appointment_id: str):
    with booking_service_scope() as service:
        appointment = service.complete_appointment(
            appointment_id, _json_body().get("notes")
        )
    return api_response(True, "Appointment completed", appointment.to_dict())


@appointment_bp.route("/availability", methods=["GET"])
def check_availability():
    """``?barber_id=...&date=<ISO datetime>&duration=30``"""
    args = request.args
    with booking_service_scope() as service:
        available = service.check_availability(
            args.get("barber_id"), args.get("date"), args.get("duration")
        )
    message = "Time slot available" if available else "Time slot unavailable"
    return api_response(True, message, {"available": available})


@appointment_bp.route("/availability/slots", methods=["GET"])
def available_slots():
    args = request.args
    with booking_service_scope() as service:
        slots = service.get_available_slots(
            args.get("barber_id"), args.get("date"), args.get("duration")
        )
    return api_response(
        True, f"{len(slots)} slot(s) available", [slot_to_dict(s) for s in slots]
    )


@appointment_bp.route("/schedule", methods=["GET"])
def daily_schedule():
    with booking_service_scope() as service:
        schedule = service.get_daily_schedule(request.args.get("date"))
    data = [
        {
            "barber_id": barber_id,
            "barber": barber_to_dict(entry["barber"]) if entry["barber"] else None,
            "appointments": [apt.to_dict() for apt in entry["appointments"]],
        }
        for barber_id, entry in schedule.items()
    ]
    return api_response(True, "Daily schedule", data)
