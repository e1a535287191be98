"""
Health controller - health check endpoints for monitoring.
"""

import logging

from flask import Blueprint

from barbershop.core.api_utils import api_response, booking_service_scope

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/health")


@health_bp.route("/db", methods=["GET"])
def database_health_check():
    """
    Check that the appointment store answers a trivial query.

    Status codes:
        200: Database reachable
        503: Database unreachable

    Note:
        - No authentication required (monitoring endpoint)
    """
    with booking_service_scope() as service:
        result = service.check_db_connection()

    logger.info(
        "Health check: database connection",
        extra={"context": {"endpoint": "/health/db", **result}},
    )
    status_code = 200 if result["connected"] else 503
    return api_response(result["connected"], result["message"], result, status_code)
