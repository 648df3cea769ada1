import logging

import pytest

from src.config import Settings
from src.main import CLIENT_LOGGERS, apply_logging_preferences


@pytest.fixture
def reset_client_loggers():
    levels = {name: logging.getLogger(name).level for name in CLIENT_LOGGERS}
    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)
    yield
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


def test_client_loggers_quieted_by_default(reset_client_loggers):
    apply_logging_preferences(Settings(_env_file=None))

    for name in CLIENT_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_client_loggers_left_alone_when_disabled(reset_client_loggers):
    apply_logging_preferences(Settings(_env_file=None, suppress_client_logs=False))

    for name in CLIENT_LOGGERS:
        assert logging.getLogger(name).level == logging.NOTSET
    assert logging.getLogger("uvicorn.access").level == logging.WARNING
