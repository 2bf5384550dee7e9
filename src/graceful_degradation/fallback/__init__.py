"""Fallback payloads for graceful degradation."""

from .responses import (
    DEFAULT_FALLBACK_MESSAGE,
    FALLBACK_MESSAGES,
    FallbackResponse,
    build_fallback_response,
    fallback_message,
)

__all__ = [
    "FallbackResponse",
    "build_fallback_response",
    "fallback_message",
    "FALLBACK_MESSAGES",
    "DEFAULT_FALLBACK_MESSAGE",
]
