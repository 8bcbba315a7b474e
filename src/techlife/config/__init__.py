"""Configuration loading for Techlife."""

from techlife.config.manager import ConfigManager
from techlife.config.schema import SiteConfig

__all__ = ["ConfigManager", "SiteConfig"]
