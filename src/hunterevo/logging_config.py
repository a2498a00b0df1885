"""Structured JSON logging for the CLI."""

from __future__ import annotations

import logging
import sys
from typing import Any

from pythonjsonlogger.json import JsonFormatter


class HunterJsonFormatter(JsonFormatter):
    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        if not log_record.get("timestamp"):
            log_record["timestamp"] = record.created
        log_record["level"] = record.levelname
        log_record["module"] = record.module
        log_record["lineno"] = record.lineno


def setup_logging(log_level_str: str = "WARNING") -> None:
    """Install one JSON stderr handler on the package logger."""
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    package_logger = logging.getLogger("hunterevo")
    package_logger.setLevel(log_level)
    if any(isinstance(handler.formatter, HunterJsonFormatter) for handler in package_logger.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(HunterJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    package_logger.addHandler(handler)
