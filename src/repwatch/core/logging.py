# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Structured logging with provider credential redaction.

Provider keys travel in URLs (IPQS puts the key in the path, Safe Browsing
in the query string) and httpx logs every request URL at INFO, so the
redacting handler is attached to the ``httpx`` logger as well as ours.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any

REDACT_PATTERNS = [
    re.compile(r"(/api/json/url/)[^/\s]+"),
    re.compile(r"([?&](?:key|apikey|api_key)=)[^&\s\"']+", re.IGNORECASE),
    re.compile(r"((?:x-apikey|x-api-key)['\"]?\s*[:=]\s*['\"]?)[A-Za-z0-9\-._~]+", re.IGNORECASE),
    re.compile(r"(Bearer\s+[a-zA-Z0-9\-._~+/]{4})[a-zA-Z0-9\-._~+/]*"),
]

# Loggers that receive the repwatch handler
_LOGGER_NAMES = ("repwatch", "httpx")


def redact_sensitive(text: str) -> str:
    for pattern in REDACT_PATTERNS:
        text = pattern.sub(r"\1[REDACTED]", text)
    return text


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``source`` and ``domain`` extras are kept."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_sensitive(record.getMessage()),
        }
        for key in ("source", "domain", "request_id"):
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = str(value)
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = redact_sensitive(str(record.exc_info[1]))
        return json.dumps(entry)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return redact_sensitive(super().format(record))


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install one stderr handler on the repwatch and httpx loggers.

    Calling it again replaces the handler, so the CLI callback can run
    once per invocation.
    """
    handler = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )

    resolved = getattr(logging, level.upper(), logging.INFO)
    for name in _LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.addHandler(handler)
        logger.propagate = False
        # httpx request lines are noise unless debugging
        logger.setLevel(resolved if name == "repwatch" else max(resolved, logging.WARNING))
