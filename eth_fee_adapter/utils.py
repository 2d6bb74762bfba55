"""Bunch of random utilities."""

import logging
import os

import coloredlogs


def setup_console_logging(default_log_level="warning") -> logging.Logger:
    """Set up coloured log output.

    - Helper function to have nicer logging output in scripts
    - ``LOG_LEVEL`` environment variable overrides the default level
    - Tune down some noisy dependency library logging

    :return:
        Root logger
    """

    level = os.environ.get("LOG_LEVEL", default_log_level).upper()
    numeric_level = getattr(logging, level, None)
    assert numeric_level, f"No level: {level}"

    fmt = "%(asctime)s %(name)-44s %(message)s"
    date_fmt = "%H:%M:%S"

    coloredlogs.install(level=numeric_level, fmt=fmt, datefmt=date_fmt)

    # Mute noise
    logging.getLogger("web3.providers.HTTPProvider").setLevel(logging.WARNING)
    logging.getLogger("web3.RequestManager").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)

    return logging.getLogger()
