import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

logger = logging.getLogger(__name__)


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """Application factory for the scheduling API."""
    from barbershop.core.api_utils import register_error_handlers
    from barbershop.core.config import (
        get_logging_config,
        get_scheduling_config,
        get_seed_sample_data,
        log_scheduling_config,
    )
    from barbershop.core.logging_config import setup_logging

    app = Flask(__name__)
    app.config["JSON_SORT_KEYS"] = False
    if config_overrides:
        app.config.update(config_overrides)

    logging_config = get_logging_config()
    setup_logging(
        app=app,  # Pass app to register request/response hooks
        log_level=logging_config.level,
        enable_sql_echo=logging_config.enable_sql_echo,
        log_to_file=logging_config.log_to_file and not app.config.get("TESTING"),
        use_json_format=logging_config.use_json_format,
    )
    log_scheduling_config(get_scheduling_config())

    # Tables are created eagerly; create_all is idempotent
    from barbershop.db.session import create_tables, get_engine

    create_tables()
    engine = get_engine()
    logger.info(
        "Database ready",
        extra={
            "context": {
                "url": engine.url.render_as_string(hide_password=True),
                "driver": engine.dialect.name,
            }
        },
    )

    if app.config.get("SEED_SAMPLE_DATA", get_seed_sample_data()):
        from barbershop.db.seed import seed_sample_data

        seed_sample_data()

    from barbershop.controllers import appointment_bp, catalog_bp, health_bp

    app.register_blueprint(appointment_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(health_bp)
    register_error_handlers(app)

    return app
