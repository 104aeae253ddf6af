"""Entry point of the booking service."""

from __future__ import annotations

import argparse
from typing import Sequence

from flask import Flask

from .api import create_app
from .config import Config, init_config
from .db import init_database
from .logsetup import setup_logger
from .payment import create_payment

PORT = 8080


def build_app(config: Config) -> Flask:
    """Open the database, connect the payment service and build the web app."""
    db = init_database(config.db)
    payment = create_payment(config.payment)
    return create_app(db, payment)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the booking service on port 8080."""
    parser = argparse.ArgumentParser(
        prog="hotelbooking",
        description="Run the hotel booking service. The configuration file is "
        "named by the BOOKING_CONFIG_PATH environment variable.",
    )
    parser.parse_args(argv)

    logger = setup_logger()
    try:
        config = init_config()
    except (OSError, ValueError) as exc:
        logger.error("Error on loading config! %s", exc)
        raise
    try:
        app = build_app(config)
    except Exception as exc:
        logger.error("Error on initializing database! %s", exc)
        raise

    logger.info("My booking started!")
    app.run(host="0.0.0.0", port=PORT)