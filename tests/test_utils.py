"""Console logging setup."""

import logging

import coloredlogs

from eth_fee_adapter.utils import setup_console_logging


def test_setup_console_logging(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = setup_console_logging()
    assert root is logging.getLogger()
    assert coloredlogs.get_level() == logging.DEBUG
    assert logging.getLogger("urllib3.connectionpool").level == logging.WARNING


def test_default_log_level(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    setup_console_logging(default_log_level="info")
    assert coloredlogs.get_level() == logging.INFO
