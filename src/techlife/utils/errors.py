"""Custom exceptions for Techlife."""


class TechlifeError(Exception):
    """Base exception for all Techlife errors."""

    pass


class ConfigError(TechlifeError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class NotFoundError(TechlifeError):
    """Requested resource does not exist."""

    pass


class FeedError(TechlifeError):
    """Podcast feed errors."""

    pass


class FeedParseError(FeedError):
    """Feed file missing or unreadable."""

    pass


class AnalysisLoadError(FeedError):
    """Episode analysis side file missing or unreadable."""

    pass


class SubmissionError(TechlifeError):
    """Base class for listener question submission failures.

    Messages are user-facing and written in Russian; ``status_code`` is the
    HTTP status the web layer answers with.
    """

    status_code = 500


class ValidationError(SubmissionError):
    """Submitted form failed field validation."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None, suggestion: str | None = None):
        super().__init__(message)
        self.field = field
        self.suggestion = suggestion


class RateLimitExceededError(SubmissionError):
    """Too many submissions from one client within the window."""

    status_code = 429


class StorageWriteError(SubmissionError):
    """Question log could not be written."""

    status_code = 500
