"""Logging setup tests."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from dtkbuild.utils.log_setup import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_installs_rich_handler(restore_root_logger) -> None:
    """Root logger gets a single RichHandler at WARNING."""
    setup_logging()

    assert restore_root_logger.level == logging.WARNING
    assert any(isinstance(h, RichHandler) for h in restore_root_logger.handlers)


def test_setup_logging_verbose(restore_root_logger) -> None:
    """Verbose mode logs at DEBUG."""
    setup_logging(verbose=True)
    assert restore_root_logger.level == logging.DEBUG


def test_http_client_loggers_stay_quiet(restore_root_logger) -> None:
    """urllib3 never logs below INFO, even in verbose mode."""
    urllib3_logger = logging.getLogger("urllib3")
    previous = urllib3_logger.level
    try:
        setup_logging(verbose=True)
        assert urllib3_logger.level == logging.INFO
        setup_logging()
        assert urllib3_logger.level == logging.WARNING
    finally:
        urllib3_logger.setLevel(previous)
