"""Configuration management for the personnel registry."""

from .settings import ConfigLoadResult, Settings, load_settings

__all__ = ["ConfigLoadResult", "Settings", "load_settings"]
