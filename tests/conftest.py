"""Shared fixtures."""

import logging

import pytest

from deep_redact.service.pipeline import RedactionService


@pytest.fixture
def default_service():
    """Rebuilds the default redactor before and after the test."""
    RedactionService.reset()
    yield RedactionService
    RedactionService.reset()


@pytest.fixture
def restore_root_logger():
    """Restores root logger handlers and level changed by configure_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
