"""Logging utilities: system logger and JSONL formatting."""

from __future__ import annotations

__all__ = [
    "ISO8601Formatter",
    "configure_system_logger_file",
    "get_system_logger",
]

from .iso_formatter import ISO8601Formatter
from .system_logger import configure_system_logger_file, get_system_logger
