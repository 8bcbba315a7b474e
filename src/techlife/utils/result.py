"""Explicit load results for file-backed sources.

Loaders return a ``LoadResult`` instead of swallowing errors, so callers
choose the fallback (usually an empty collection plus a warning).
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from techlife.utils.errors import TechlifeError

T = TypeVar("T")


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Either a loaded value or the error that prevented loading.

    Example:
        >>> result = load_analysis(path)
        >>> records = result.unwrap_or({})
    """

    value: T | None = None
    error: TechlifeError | None = None

    @classmethod
    def ok(cls, value: T) -> "LoadResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: TechlifeError) -> "LoadResult[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the stored error if loading failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` if loading failed."""
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]
