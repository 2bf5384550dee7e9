"""Structured logging utilities."""

from .logging import (
    CorrelationIDMiddleware,
    CorrelationIDProcessor,
    LogFormat,
    LogLevel,
    get_correlation_id,
    set_correlation_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "LogLevel",
    "LogFormat",
    "CorrelationIDProcessor",
    "CorrelationIDMiddleware",
    "get_correlation_id",
    "set_correlation_id",
]
