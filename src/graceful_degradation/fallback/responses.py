"""Caller-facing payloads returned while a dependency is degraded."""

import math
from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_MESSAGE = "Service is temporarily unavailable. Please try again later."

FALLBACK_MESSAGES: dict[str, str] = {
    "openai": "AI service is temporarily unavailable. Please try again in a few moments.",
    "supabase": (
        "Database service is temporarily unavailable. "
        "Your data is safe, please try again shortly."
    ),
    "redis": "Cache service is temporarily unavailable. Service may be slower than usual.",
    "weather": "Weather service is currently unavailable. Please try again later.",
    "n8n": "Automation service is temporarily unavailable. Please try again shortly.",
}


class FallbackResponse(BaseModel):
    """Degraded-but-successful response body."""

    error: str = Field(description="Human-readable explanation")
    service: str = Field(description="Dependency that is unavailable")
    fallback: Literal[True] = True
    retry_after: int = Field(ge=0, description="Seconds before retrying is useful")


def fallback_message(service_name: str, custom_message: str | None = None) -> str:
    """Pick the message for a service's fallback response."""
    return (
        custom_message
        or FALLBACK_MESSAGES.get(service_name)
        or DEFAULT_FALLBACK_MESSAGE
    )


def build_fallback_response(
    service_name: str,
    reset_timeout: float,
    custom_message: str | None = None,
) -> FallbackResponse:
    """Build the fallback payload for a service.

    Args:
        service_name: Name of the service
        reset_timeout: The service's reset timeout in seconds
        custom_message: Overrides the per-service message

    Returns:
        Fallback response
    """
    return FallbackResponse(
        error=fallback_message(service_name, custom_message),
        service=service_name,
        retry_after=math.ceil(reset_timeout),
    )
