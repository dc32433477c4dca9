import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru():
    yield
    # sinks added by cli.main point at pytest's per-test capture streams
    logger.remove()
