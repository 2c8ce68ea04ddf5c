"""Configuration module for Usage Pulse API."""

from .settings import settings, get_settings

__all__ = ["settings", "get_settings"]
