import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def disable_logger_sinks():
    logger.remove()
    logger.add(lambda msg: None)
    yield
    logger.remove()
