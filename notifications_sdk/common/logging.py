"""Package logger.

Call sites log dicts (``logger.info({"manage": "request", ...})``); the
powertools Logger renders each record as one JSON line with the dict under
"message" and the service name attached, so SDK records are easy to pick
out of aggregated application logs.
"""

from __future__ import annotations

import os
from typing import Any

from aws_lambda_powertools import Logger

LOGGER_NAME = "notifications-sdk"


def build_logger(service: str = LOGGER_NAME, **kwargs: Any) -> Logger:
    """Powertools Logger for the SDK; level defaults to LOG_LEVEL (INFO)."""
    kwargs.setdefault("level", (os.getenv("LOG_LEVEL") or "INFO").strip().upper())
    return Logger(service=service, **kwargs)


logger = build_logger()
