"""Logging configuration for the application."""
import logging
import sys

from registrar.config import settings


def setup_logging():
    """Configure the root logger once: stdout handler, app-wide format."""
    root_logger = logging.getLogger()
    if any(getattr(h, "_registrar", False) for h in root_logger.handlers):
        return

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler._registrar = True

    root_logger.setLevel(settings.LOG_LEVEL.upper())
    root_logger.addHandler(console_handler)

    # Set higher log levels for noisy components
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
