"""
Unit tests for logging setup.
"""

import logging

import pytest

from config import EtcdBackupSettings
from utils import NOISY_LOGGERS, configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    third_party = {name: logging.getLogger(name).level for name in NOISY_LOGGERS}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, lvl in third_party.items():
        logging.getLogger(name).setLevel(lvl)


class TestConfigureLogging:

    def test_applies_level(self, restore_logging):
        settings = EtcdBackupSettings(monitoring={"log_level": "debug"})

        configure_logging(settings)

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("botocore").level == logging.WARNING

    def test_unknown_level(self, restore_logging):
        settings = EtcdBackupSettings(monitoring={"log_level": "chatty"})

        with pytest.raises(ValueError, match="chatty"):
            configure_logging(settings)
