"""
Tests for logging setup.
"""

import logging

import pytest
from customer_tracker.logging_config import get_logger, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_sets_level_and_single_handler(restore_root_logger):
    setup_logging("debug", service_name="test-service")

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert "test-service" in root.handlers[0].formatter._fmt


def test_setup_logging_replaces_existing_handlers(restore_root_logger):
    """Test handlers installed earlier are removed, not stacked."""
    stale = logging.NullHandler()
    logging.getLogger().addHandler(stale)

    setup_logging("INFO")

    handlers = logging.getLogger().handlers
    assert stale not in handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)


def test_unknown_level_falls_back_to_info(restore_root_logger):
    setup_logging("chatty")
    assert logging.getLogger().level == logging.INFO


def test_http_client_loggers_are_quieted(restore_root_logger):
    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_get_logger():
    assert get_logger("customer_tracker.x").name == "customer_tracker.x"
