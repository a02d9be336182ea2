"""Core: config and constants."""

from registry_client.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
