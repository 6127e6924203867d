"""Configuration management."""

from .loader import ConfigLoader
from .settings import Settings, load_settings

__all__ = ["Settings", "load_settings", "ConfigLoader"]
