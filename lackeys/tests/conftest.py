"""Shared pytest fixtures for lackeys tests."""

import logging

import pytest

from lackeys import clear_registry


@pytest.fixture(autouse=True)
def clean_registry():
    """Clean the registration table before and after each test."""
    clear_registry()
    yield
    clear_registry()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() so caplog sees lackeys records."""
    yield
    package_logger = logging.getLogger("lackeys")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
