"""Configuration for graceful degradation."""

from .settings import DegradationSettings, Environment, get_settings

__all__ = ["DegradationSettings", "Environment", "get_settings"]
