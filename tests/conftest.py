import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_storefront_logger():
    """Undo configure_logging() so caplog sees package records."""
    yield
    logger = logging.getLogger("storefront")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
