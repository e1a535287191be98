# Core package initialization
# Configuration, errors, logging and shared API helpers

from . import config, exceptions, logging_config

__all__ = [
    "config",
    "exceptions",
    "logging_config",
]
