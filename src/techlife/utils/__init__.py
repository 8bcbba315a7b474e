"""Utility functions and helpers for Techlife."""

from techlife.utils.errors import (
    AnalysisLoadError,
    ConfigError,
    FeedError,
    FeedParseError,
    InvalidConfigError,
    NotFoundError,
    RateLimitExceededError,
    StorageWriteError,
    SubmissionError,
    TechlifeError,
    ValidationError,
)
from techlife.utils.paths import get_config_dir, get_config_file
from techlife.utils.result import LoadResult

__all__ = [
    # Errors
    "TechlifeError",
    "ConfigError",
    "InvalidConfigError",
    "NotFoundError",
    "FeedError",
    "FeedParseError",
    "AnalysisLoadError",
    "SubmissionError",
    "ValidationError",
    "RateLimitExceededError",
    "StorageWriteError",
    # Results
    "LoadResult",
    # Paths
    "get_config_dir",
    "get_config_file",
]
