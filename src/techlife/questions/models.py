"""Data models for listener questions."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

CATEGORY_NAMES: dict[str, str] = {
    "technology": "Технологии",
    "philosophy": "Философия",
    "travel": "Путешествия",
    "security": "ИИ",
    "lifestyle": "Образ жизни",
    "future": "Будущее",
    "other": "Другое",
}


def get_category_name(category: str | None) -> str:
    """Human-readable category name, ``Другое`` for anything unknown."""
    return CATEGORY_NAMES.get(category or "", CATEGORY_NAMES["other"])


class QuestionForm(BaseModel):
    """Raw fields posted by the question form.

    Everything is optional here; the gate decides what is acceptable.
    ``website`` is the hidden honeypot field.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str | None = None
    email: str | None = None
    question: str | None = None
    category: str | None = None
    privacy: Any = None
    website: str | None = None
    form_start_time: str | None = None

    @field_validator("name", "email", "question", "category", "form_start_time", mode="before")
    @classmethod
    def coerce_scalar(cls, v: Any) -> Any:
        """Accept numbers as text; structured values count as missing."""
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return None

    @field_validator("website", mode="before")
    @classmethod
    def coerce_honeypot(cls, v: Any) -> Any:
        # Any value at all in the hidden field means it was filled
        if v is None or isinstance(v, str):
            return v
        return str(v)


class ClientInfo(BaseModel):
    """Who sent the request."""

    ip: str = "unknown"
    user_agent: str | None = None


class QuestionSubmission(BaseModel):
    """A stored listener question. Append-only."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: str
    name: str
    email: str | None = None
    question: str
    category: str = "other"
    ip: str
    user_agent: str | None = None


class GateOutcome(str, Enum):
    """How the gate disposed of a submission that was not rejected."""

    ACCEPTED = "accepted"
    DROPPED_HONEYPOT = "dropped_honeypot"
    DROPPED_TOO_FAST = "dropped_too_fast"

    @property
    def stored(self) -> bool:
        return self is GateOutcome.ACCEPTED


class QuestionListing(BaseModel):
    """A stored question prepared for the admin listing.

    Built from whatever the log holds, so every stored field is optional
    and non-string values are shown as text.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    timestamp: str = ""
    name: str = ""
    email: str | None = None
    question: str = ""
    category: str = "other"
    ip: str = ""
    user_agent: str | None = None
    category_name: str = ""
    question_preview: str = ""
    formatted_date: str = ""
    formatted_time: str = ""
    submitted_at: datetime | None = Field(default=None, exclude=True)

    @field_validator("timestamp", "name", "question", "category", "ip", mode="before")
    @classmethod
    def coerce_text(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].default
        return v if isinstance(v, str) else str(v)

    @field_validator("email", "user_agent", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)
