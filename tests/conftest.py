import logging

import pytest


@pytest.fixture(autouse=True)
def reset_lightsailctl_logger():
    logger = logging.getLogger("lightsailctl")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)
