from __future__ import annotations

import logging

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(threadName)s - %(message)s"


def configure_logging(level: str = "info") -> None:
    """Configure root logging for the command line tool.

    Third-party libraries stay at WARNING unless debug output is requested.
    """
    numeric = LOG_LEVELS[level.lower()]
    logging.basicConfig(level=numeric, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S", force=True)
    if numeric > logging.DEBUG:
        for noisy in ("botocore", "boto3", "urllib3"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
