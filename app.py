#!/usr/bin/env python3
"""
Machine inventory web service
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from flask import Flask

from database import init_database
from machines.api import machines_bp
from machines.config import MachinesConfig

logger = logging.getLogger("machines")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(config: MachinesConfig | None = None) -> Flask:
    """Build the Flask app, initialise the database and mount the API."""
    if config is None:
        load_dotenv()
        config = MachinesConfig.from_env()

    import machines.api as api_module

    api_module._config = config

    configure_logging(config.log_level)
    init_database(config.database_url)

    app = Flask(__name__)
    app.register_blueprint(machines_bp)
    logger.info("Machine inventory ready (cloud sync %s)", "on" if config.provider_export_dir else "off")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8000, debug=False)
