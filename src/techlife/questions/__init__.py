"""Listener question submissions."""

from techlife.questions.gate import SUCCESS_MESSAGE, SubmissionGate
from techlife.questions.models import (
    CATEGORY_NAMES,
    ClientInfo,
    GateOutcome,
    QuestionForm,
    QuestionSubmission,
    get_category_name,
)
from techlife.questions.store import QuestionStore

__all__ = [
    "CATEGORY_NAMES",
    "ClientInfo",
    "GateOutcome",
    "QuestionForm",
    "QuestionStore",
    "QuestionSubmission",
    "SUCCESS_MESSAGE",
    "SubmissionGate",
    "get_category_name",
]
