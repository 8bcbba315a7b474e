"""Techlife - backend for the Технологии и жизнь podcast website."""

__version__ = "0.1.0"
