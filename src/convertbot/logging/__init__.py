"""Structured logging module for ConvertBot.

Provides configurable logging with JSON format support and file rotation.
Includes session context support for conversion worker threads.
"""

from convertbot.logging.config import configure_logging
from convertbot.logging.context import (
    SessionContextFilter,
    get_session_context,
    session_context,
)
from convertbot.logging.handlers import JSONFormatter

__all__ = [
    "JSONFormatter",
    "SessionContextFilter",
    "configure_logging",
    "get_session_context",
    "session_context",
]
