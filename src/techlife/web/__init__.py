"""HTTP surface for Techlife."""

from techlife.web.app import create_app
from techlife.web.state import AppState

__all__ = ["AppState", "create_app"]
