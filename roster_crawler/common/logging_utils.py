"""Logging setup shared by the crawler CLI and its scrapers.

Records may carry crawl context through ``extra`` (``team``, ``player_id``,
``url``). The console format appends it as ``[team=... player_id=...]``,
the JSON format emits it as top-level keys.

Environment variables:
    LOG_LEVEL=INFO|DEBUG|... (default: INFO, overridden by the ``level`` argument)
    LOG_FORMAT=console|json (default: console)
    LOG_NO_COLOR=1 disables colours on the console format.
    LOG_TIMEZONE=utc|local (default: local)

Usage:
    from roster_crawler.common.logging_utils import configure_logging, get_logger
    configure_logging(service="roster-crawler")
    logger = get_logger(__name__)
    logger.warning("Profile skipped", extra={"team": "fc-arsenal", "player_id": "433177"})
"""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

_CONFIG_LOCK = threading.Lock()
_ALREADY_CONFIGURED = False

# Context keys rendered by the console formatter, in this order
CONTEXT_KEYS = ("team", "player_id", "url")

_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}


def _timestamp(record: logging.LogRecord, tz_local: bool) -> datetime:
    ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return ts.astimezone() if tz_local else ts


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    """Attributes a caller attached through ``extra=``."""
    return {
        k: v
        for k, v in record.__dict__.items()
        if k not in _RECORD_ATTRS and not k.startswith("_")
    }


class ConsoleFormatter(logging.Formatter):
    """``time | LEVEL | logger | message [team=.. player_id=..]``, optionally coloured."""

    COLORS = {
        "DEBUG": "\x1b[38;5;245m",
        "INFO": "\x1b[38;5;39m",
        "WARNING": "\x1b[38;5;214m",
        "ERROR": "\x1b[38;5;196m",
        "CRITICAL": "\x1b[48;5;196m\x1b[38;5;231m",
    }
    RESET = "\x1b[0m"

    def __init__(self, tz_local: bool, color: bool):
        super().__init__()
        self.tz_local = tz_local
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        ts_str = _timestamp(record, self.tz_local).strftime("%Y-%m-%d %H:%M:%S")
        line = f"{ts_str} | {record.levelname:<8} | {record.name} | {record.getMessage()}"
        extras = record_extras(record)
        context = " ".join(f"{k}={extras[k]}" for k in CONTEXT_KEYS if extras.get(k))
        if context:
            line += f" [{context}]"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        color = self.COLORS.get(record.levelname, "") if self.color else ""
        return f"{color}{line}{self.RESET}" if color else line


class JsonFormatter(logging.Formatter):
    """One JSON object per line; extras become top-level keys."""

    def __init__(self, tz_local: bool):
        super().__init__()
        self.tz_local = tz_local

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _timestamp(record, self.tz_local).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for k, v in record_extras(record).items():
            if k in payload:
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except (TypeError, ValueError):
                payload[k] = repr(v)
        return json.dumps(payload, ensure_ascii=False)


def _build_formatter(log_format: str, tz_local: bool, stream_is_tty: bool) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter(tz_local=tz_local)
    color = stream_is_tty and os.getenv("LOG_NO_COLOR") != "1"
    return ConsoleFormatter(tz_local=tz_local, color=color)


def configure_logging(
    service: str | None = None,
    *,
    level: str | None = None,
    log_file: str | None = None,
    force: bool = False,
) -> None:
    """Install the stderr handler (and an optional file handler) on the root logger.

    Only the first call takes effect unless ``force`` is set. ``service`` is
    stamped on every record emitted through :func:`get_logger`.
    """
    global _ALREADY_CONFIGURED
    with _CONFIG_LOCK:
        if _ALREADY_CONFIGURED and not force:
            return

        log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        log_format = os.getenv("LOG_FORMAT", "console").lower()
        tz_local = os.getenv("LOG_TIMEZONE", "local").lower() != "utc"

        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)

        handler = logging.StreamHandler()
        handler.setFormatter(_build_formatter(log_format, tz_local, sys.stderr.isatty()))
        root.addHandler(handler)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            # no colour codes in files
            file_handler.setFormatter(_build_formatter(log_format, tz_local, False))
            root.addHandler(file_handler)

        root.setLevel(getattr(logging, log_level, logging.INFO))
        _CrawlLoggerAdapter.service = service
        _ALREADY_CONFIGURED = True


class _CrawlLoggerAdapter(logging.LoggerAdapter):
    # read per record, so module-level loggers created before configure_logging() pick it up
    service: Optional[str] = None

    def process(self, msg: Any, kwargs: Dict[str, Any]):
        extra = dict(kwargs.get("extra") or {})
        if self.service and "service" not in extra:
            extra["service"] = self.service
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(name: str) -> logging.LoggerAdapter:
    return _CrawlLoggerAdapter(logging.getLogger(name), {})


__all__ = [
    "CONTEXT_KEYS",
    "configure_logging",
    "get_logger",
    "record_extras",
]
