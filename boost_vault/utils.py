"""Console helpers for scripts."""

import logging
import os

import coloredlogs


def setup_console_logging(default_log_level="warning", simplified_logging=False) -> logging.Logger:
    """Set up coloured log output.

    - Level comes from ``LOG_LEVEL`` environment variable, falling back to `default_log_level`

    - Tune down noisy web3 request logging

    :return:
        Root logger
    """
    level = os.environ.get("LOG_LEVEL", default_log_level).upper()
    numeric_level = getattr(logging, level, None)
    assert numeric_level, f"No log level: {level}"

    if simplified_logging:
        fmt = "%(message)s"
    else:
        fmt = "%(asctime)s %(name)-44s %(message)s"

    coloredlogs.install(level=numeric_level, fmt=fmt, datefmt="%H:%M:%S")

    logging.getLogger("web3.RequestManager").setLevel(logging.WARNING)
    logging.getLogger("web3.providers.HTTPProvider").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.INFO)
    return logging.getLogger()
