"""
Shared pytest fixtures.
"""
import logging

import pytest
import structlog


@pytest.fixture
def restore_logging():
    """Put the root logger and structlog back the way they were."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()
