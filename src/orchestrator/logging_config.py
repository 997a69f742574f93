"""
Reelview Logging
================

One logging setup shared by the API and the CLI, driven by LoggingConfig.

Review pipeline records carry their context through `extra=`:
    product   - product name being analyzed
    stage     - PipelineStage value
    duration  - stage duration in seconds
    video_id  - YouTube video id (transcript failures)
    category  - feature category (aggregation decisions)

Console lines show that context as a trailing [key=value ...] block; JSON
lines (LOG_JSON=true or --json-logs) carry it as top-level keys.

Usage:
    from src.orchestrator.logging_config import setup_logging

    setup_logging(get_settings().logging, verbose=True)
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..data.config import LoggingConfig, get_settings

CONTEXT_FIELDS = ("product", "stage", "category", "video_id", "duration")

# Libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Review context attached to a record, in CONTEXT_FIELDS order."""
    context = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            context[key] = value
    return context


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines with the review context appended."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if context:
            line += "  [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

        {"ts": "...", "level": "INFO", "logger": "src.reviews.review_insights",
         "msg": "...", "product": "Pixel 9", "stage": "aggregation"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(record_context(record))
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(
    config: Optional[LoggingConfig] = None,
    verbose: bool = False,
    json_output: Optional[bool] = None,
):
    """
    Configure the root logger from LoggingConfig.

    Args:
        config: Logging settings (defaults to get_settings().logging)
        verbose: Force DEBUG level
        json_output: Override config.json_logs when not None
    """
    config = config or get_settings().logging
    level = "DEBUG" if verbose else config.level
    use_json = config.json_logs if json_output is None else json_output
    formatter = JSONFormatter() if use_json else ConsoleFormatter()

    handlers = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        os.makedirs(os.path.dirname(config.log_file) or ".", exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        ))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
