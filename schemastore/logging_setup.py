"""
Logging configuration for applications embedding schemastore.

The library itself only creates module loggers; setup_logging() is for
the tool that owns the process.
"""

from __future__ import annotations

import logging
from typing import Optional

import json_log_formatter

from .config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging based on configuration.

    Args:
        settings: Settings to use (loaded from env if not provided)
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]
