import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def quiet_logger():
    yield
    # the cli installs a sink on a stream that is closed after each run
    logger.remove()
    logger.disable("constguard")
