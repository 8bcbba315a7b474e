"""Static asset helpers."""

from techlife.assets.cache_buster import CacheBuster

__all__ = ["CacheBuster"]
