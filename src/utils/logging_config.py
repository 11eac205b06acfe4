"""Structured JSON logging shared by every handler and service."""

import logging
import os

from pythonjsonlogger import jsonlogger

_FORMAT = "%(levelname)s %(name)s %(message)s %(asctime)s"


def get_logger(name: str) -> logging.Logger:
    """
    Return a JSON logger, configuring it on first use.

    Context travels in ``extra`` (correlation_id, ticket_id, user_id...), which
    the JSON formatter emits as top-level keys. OTP codes must never be passed
    in ``extra``.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    logger.propagate = False
    return logger
