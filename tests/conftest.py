import logging
import os

import pytest

from auto_commit import settings


@pytest.fixture(autouse=True)
def _reset_log_level():
    """The CLI writes the chosen level to the environment; undo it per test."""

    os.environ.pop(settings.LOG_LEVEL_ENV_VAR, None)
    yield
    os.environ.pop(settings.LOG_LEVEL_ENV_VAR, None)
    for logger in list(settings._REGISTERED_LOGGERS):
        logger.setLevel(logging.NOTSET)
