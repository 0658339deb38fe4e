"""
Logging configuration for the customer tracker.

Standard-library logging to stdout with one shared format. The Supabase
client logs every PostgREST and Auth request through httpx at INFO, so
those loggers are held at WARNING.
"""

import logging
import sys

NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access")


def setup_logging(
    log_level: str = "INFO",
    service_name: str = "customer-tracker",
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            unknown names fall back to INFO
        service_name: Name of the service for log identification
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            f"%(asctime)s - {service_name} - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Get a module logger (usually called with __name__)."""
    return logging.getLogger(name)
