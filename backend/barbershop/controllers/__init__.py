# Controllers package initialization
# HTTP blueprints exposing the booking call surface

from .appointment_controller import appointment_bp
from .catalog_controller import catalog_bp
from .health_controller import health_bp

__all__ = ["appointment_bp", "catalog_bp", "health_bp"]
